"""
Reference decoding: lossy JSON-array parsing of reference field values.

Shopify stores list reference metafields (and metaobject list fields) as a
JSON-encoded array of GIDs inside a single text value. Upstream data is not
always consistent, so decoding never raises: anything that is not a JSON
array of strings decodes to no references.
Version: 1.0.0
"""
import json
from typing import Any, List


def decode_reference_list(value: Any) -> List[str]:
    """Decode a raw field value into a list of referenced IDs, or [] if invalid."""
    if value is None:
        return []
    if isinstance(value, list):
        decoded = value
    elif isinstance(value, (str, bytes)):
        try:
            decoded = json.loads(value)
        except (ValueError, TypeError):
            return []
    else:
        return []

    if not isinstance(decoded, list):
        return []
    if not all(isinstance(item, str) for item in decoded):
        return []
    return [item for item in decoded if item]


def dedupe_preserving_order(values: List[str]) -> List[str]:
    seen = set()
    unique = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique
