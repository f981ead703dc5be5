"""
Unit tests for the parent-reference scanner.
"""
import pytest

from metafield_search.core.exceptions import DecodeError
from metafield_search.services.parent_scanner import (
    ParentReferenceScanner,
    parents_from_product,
)


pytestmark = pytest.mark.unit


class TestParentsFromProduct:

    def test_one_record_per_field_type(self, make_product):
        product = make_product("P2", "KIT-1", add_ons=["M1", "M9"], options=["M2", "M1"])

        parents = parents_from_product(product, frozenset({"M1", "M2"}))

        assert [(p.metafield_type, p.metaobject_ids) for p in parents] == [
            ("add_ons", ["M1"]),
            ("options", ["M2", "M1"]),
        ]
        assert all(p.product_id == "P2" and p.product_sku == "KIT-1" for p in parents)

    def test_duplicate_references_collapsed(self, make_product):
        product = make_product("P2", "KIT-1", add_ons=["M1", "M1"])
        parents = parents_from_product(product, frozenset({"M1"}))
        assert parents[0].metaobject_ids == ["M1"]

    def test_malformed_add_ons_still_scans_options(self, make_product):
        product = make_product("P2", "KIT-1", add_ons="{broken", options=["M1"])
        parents = parents_from_product(product, frozenset({"M1"}))
        assert [p.metafield_type for p in parents] == ["options"]

    def test_irrelevant_references_ignored(self, make_product):
        product = make_product("P2", "KIT-1", add_ons=["M7"])
        assert parents_from_product(product, frozenset({"M1"})) == []

    def test_product_without_variants_has_null_sku(self, make_product):
        product = make_product("P2", add_ons=["M1"])
        assert parents_from_product(product, frozenset({"M1"}))[0].product_sku is None


class TestParentReferenceScanner:

    @pytest.mark.asyncio
    async def test_scans_every_page(self, fake_catalog, make_product):
        products = [make_product(f"P{i}", f"S{i}") for i in range(6)]
        products.append(make_product("LAST", "S-LAST", add_ons=["M1"]))
        catalog = fake_catalog(products=products, page_size=3)

        result = await ParentReferenceScanner(catalog).scan(["M1"])

        assert catalog.fetch_all_products_page.await_count == 3
        assert [p.product_id for p in result.parents] == ["LAST"]

    @pytest.mark.asyncio
    async def test_continues_after_all_metaobjects_seen(self, fake_catalog, make_product):
        products = [
            make_product("P1", "S1", add_ons=["M1"]),
            make_product("P2", "S2"),
            make_product("P3", "S3"),
            make_product("P4", "S4", options=["M1"]),
        ]
        catalog = fake_catalog(products=products, page_size=1)

        result = await ParentReferenceScanner(catalog).scan(["M1"])

        assert catalog.fetch_all_products_page.await_count == 4
        assert [(p.product_id, p.metafield_type) for p in result.for_metaobject("M1")] == [
            ("P1", "add_ons"),
            ("P4", "options"),
        ]

    @pytest.mark.asyncio
    async def test_replayed_product_emitted_once(self, fake_catalog, make_product):
        p1 = make_product("P1", "S1", add_ons=["M1"])
        catalog = fake_catalog(products=[p1, p1], page_size=1)

        result = await ParentReferenceScanner(catalog).scan(["M1"])

        assert len(result.parents) == 1

    @pytest.mark.asyncio
    async def test_for_metaobject_consistency(self, fake_catalog, make_product):
        products = [
            make_product("P1", "S1", add_ons=["M1", "M2"]),
            make_product("P2", "S2", add_ons=["M2"]),
        ]
        result = await ParentReferenceScanner(fake_catalog(products=products)).scan(["M1", "M2"])

        for mid in ("M1", "M2"):
            assert all(mid in p.metaobject_ids for p in result.for_metaobject(mid))
        assert [p.product_id for p in result.for_metaobject("M2")] == ["P1", "P2"]
        assert result.for_metaobject("M3") == []

    @pytest.mark.asyncio
    async def test_page_decode_error_propagates(self, fake_catalog):
        catalog = fake_catalog()
        catalog.fetch_all_products_page.side_effect = DecodeError("bad page")
        with pytest.raises(DecodeError):
            await ParentReferenceScanner(catalog).scan(["M1"])
