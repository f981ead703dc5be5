"""
Metaobject index: which entities each add-on / option metaobject references.

Shopify has no "what references this product" query, so every
metaobject of each recognized type is fetched and its fields decoded
into a set of referenced IDs. Fields that are not a JSON array of IDs
simply contribute nothing.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Sequence

from metafield_search.clients.catalog_port import CatalogClient
from metafield_search.schemas.catalog import Metaobject
from metafield_search.utils.pagination import collect_pages
from metafield_search.utils.reference_decode import decode_reference_list

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetaobjectIndexEntry:
    metaobject_id: str
    display_name: str
    source_type: str
    referenced_ids: FrozenSet[str]


@dataclass
class MetaobjectIndex:
    """Metaobject ID → entry, in upstream document order (types in configured order)."""
    entries: Dict[str, MetaobjectIndexEntry] = field(default_factory=dict)

    def add(self, entry: MetaobjectIndexEntry) -> None:
        # IDs are unique upstream; keep the first occurrence if a page repeats one
        if entry.metaobject_id not in self.entries:
            self.entries[entry.metaobject_id] = entry

    def relevant_to(self, product_ids: Iterable[str]) -> List[MetaobjectIndexEntry]:
        """Entries whose references intersect the given product IDs (exact match)."""
        wanted = frozenset(product_ids)
        return [entry for entry in self.entries.values() if entry.referenced_ids & wanted]

    def __len__(self) -> int:
        return len(self.entries)


def referenced_ids(metaobject: Metaobject) -> FrozenSet[str]:
    """Union of every field value that decodes as a list of IDs."""
    refs: set[str] = set()
    for value in metaobject.fields.values():
        refs.update(decode_reference_list(value))
    return frozenset(refs)


class MetaobjectIndexBuilder:
    def __init__(self, client: CatalogClient, metaobject_types: Sequence[str]) -> None:
        self._client = client
        self._types = tuple(metaobject_types)

    async def build(self) -> MetaobjectIndex:
        index = MetaobjectIndex()
        for metaobject_type in self._types:
            metaobjects = await collect_pages(
                lambda cursor, t=metaobject_type: self._client.fetch_metaobjects_page(t, cursor),
                label=f"metaobjects[{metaobject_type}]",
            )
            for metaobject in metaobjects:
                index.add(MetaobjectIndexEntry(
                    metaobject_id=metaobject.id,
                    display_name=metaobject.display_name,
                    source_type=metaobject_type,
                    referenced_ids=referenced_ids(metaobject),
                ))
        logger.info("metaobject index built types=%s entries=%s", list(self._types), len(index))
        return index
