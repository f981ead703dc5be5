"""
Catalog schemas: upstream products, variants and metaobjects.

These are the decoded shapes of the Shopify Admin GraphQL nodes the
resolver reads. Reference fields are decoded leniently: a malformed or
missing value becomes an empty list instead of a validation failure.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, field_validator

from metafield_search.utils.reference_decode import decode_reference_list


T = TypeVar("T")


class Variant(BaseModel):
    """A purchasable product variant."""
    id: str
    sku: Optional[str] = None
    title: Optional[str] = None


class Product(BaseModel):
    """Product with its variants and decoded add-on / option references."""
    id: str
    title: str = ""
    variants: List[Variant] = []
    add_ons_refs: List[str] = []
    options_refs: List[str] = []

    @field_validator("add_ons_refs", "options_refs", mode="before")
    @classmethod
    def _decode_refs(cls, value: Any) -> List[str]:
        return decode_reference_list(value)

    @property
    def first_sku(self) -> Optional[str]:
        """SKU of the first variant, or None when there are no variants."""
        if not self.variants:
            return None
        return self.variants[0].sku

    def refs_for(self, metafield_type: str) -> List[str]:
        if metafield_type == "add_ons":
            return self.add_ons_refs
        if metafield_type == "options":
            return self.options_refs
        return []


class Metaobject(BaseModel):
    """Metaobject with raw field values keyed by field key."""
    id: str
    display_name: str = ""
    type: str = ""
    fields: Dict[str, Optional[str]] = {}


@dataclass
class Page(Generic[T]):
    """One page of a cursor-paginated collection."""
    items: List[T] = field(default_factory=list)
    has_next_page: bool = False
    next_cursor: Optional[str] = None
