"""
Run one SKU reference search from the command line.

Usage:
    # Search and print the JSON response
    python -m metafield_search.cli GAR-403069-0166

    # Verbose logging (page-level pagination details)
    python -m metafield_search.cli GAR-403069 --log-level DEBUG

Exit status is 0 for any well-formed answer (including "no match")
and 1 when the search failed.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from metafield_search.container import get_reference_resolver


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Find metaobjects referencing products by SKU, and the products referencing those metaobjects."
    )
    parser.add_argument("sku", help="Full or partial SKU (case-insensitive substring)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Print single-line JSON",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    response = asyncio.run(get_reference_resolver().search(args.sku))
    payload = response.model_dump(mode="json", by_alias=True)
    print(json.dumps(payload, indent=None if args.compact else 2))

    return 1 if response.error else 0


if __name__ == "__main__":
    sys.exit(main())
