"""
Search schemas: response models for the SKU reference search.

Fields are snake_case in Python and serialized with camelCase aliases,
which is the JSON shape the admin UI consumes.
Version: 1.0.0
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


MetafieldType = Literal["add_ons", "options"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoundProduct(_CamelModel):
    """A product whose variant SKU matched the search token."""
    product_id: str
    product_title: str
    variant_id: str
    variant_title: Optional[str] = None
    sku: Optional[str] = None
    has_add_ons: bool = False
    has_options: bool = False


class ParentProduct(_CamelModel):
    """A product whose reference field points at one or more relevant metaobjects."""
    product_id: str
    product_title: str
    product_sku: Optional[str] = None
    metafield_type: MetafieldType
    metaobject_ids: List[str] = []


class MetaobjectMatch(_CamelModel):
    """A metaobject referencing the searched product, with the products referencing it back."""
    metaobject_id: str
    metaobject_name: str
    metaobject_type: Optional[str] = None
    parent_products: List[ParentProduct] = []


class SearchResponse(_CamelModel):
    """
    Result of one search.

    When `error` is set, `results` and `found_in_products` are always empty.
    `error_kind` is kept for the HTTP boundary and never serialized.
    """
    searched_sku: str
    found_in_products: List[FoundProduct] = []
    results: List[MetaobjectMatch] = []
    message: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = Field(default=None, exclude=True)


class ShopInfo(_CamelModel):
    """Store identity returned by the connectivity check."""
    name: str
    myshopify_domain: str
