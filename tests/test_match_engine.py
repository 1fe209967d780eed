"""
Match Engine Tests

Covers the catalog filters and the model/variant disambiguation step.
"""

from shopware_mcp_server.catalog.index import CatalogIndex
from shopware_mcp_server.matching.engine import (
    MatchEngine,
    build_name_terms,
    build_query,
    is_base_variant_request,
)
from shopware_mcp_server.matching.fitment import Fitment, resolve_fitment
from shopware_mcp_server.matching.models import MatchQuery, MatchState

from conftest import make_product


def skus(records):
    return [r.product_number for r in records]


class TestFilters:

    def test_name_terms_are_normalized_and_short_tokens_dropped(self):
        assert build_name_terms("Bremsbeläge a Vorne") == ("bremsbelage", "vorne")
        assert build_name_terms(None) == ()

    def test_all_name_terms_must_match(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        hits = engine.match(MatchQuery(name_terms=("brake", "pad")))
        assert "B1" not in skus(hits)
        assert skus(hits) == ["A1", "A2", "A3", "A4", "D1"]

    def test_name_terms_match_in_any_order_as_substrings(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        hits = engine.match(MatchQuery(name_terms=("fro", "brak")))
        assert skus(hits) == ["A1", "A2", "A3", "A4", "D1"]

    def test_brand_filter_ignores_diacritics(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        hits = engine.match(build_query("anhängerkupplung", Fitment(brand="citroen")))
        assert skus(hits) == ["C1", "C2"]

    def test_model_filter_is_substring(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        hits = engine.match(build_query("brake pad", Fitment(brand="vw", model="pol")))
        assert skus(hits) == ["A3", "A4"]

    def test_variant_filter_is_substring(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        hits = engine.match(build_query("kupplung", Fitment(brand="citroen", variant="limou")))
        assert skus(hits) == ["C1"]

    def test_base_variant_selects_blank_variants_only(self):
        catalog = CatalogIndex([
            make_product("X1", "Brake Pad", "VW", "Golf", ""),
            make_product("X2", "Brake Pad", "VW", "Golf", "Baseline"),
            make_product("X3", "Brake Pad", "VW", "Golf", "   "),
        ])
        engine = MatchEngine(catalog)
        hits = engine.match(build_query("brake pad", Fitment(variant="base variant")))
        assert skus(hits) == ["X1", "X3"]

    def test_base_variant_synonyms(self):
        for term in ("standard", "Base", "BASIC", "base variant"):
            assert is_base_variant_request(term)
        assert not is_base_variant_request("GTI")
        assert not is_base_variant_request("   ")
        assert not is_base_variant_request(None)

    def test_empty_filters_are_no_ops(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        hits = engine.match(MatchQuery(name_terms=("brake", "disc"), brand="", model=None))
        assert skus(hits) == ["B1"]


class TestDisambiguation:

    def test_multiple_models_ask_for_model(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        result = engine.search("brake pad", Fitment(brand="VW"))

        assert result.state is MatchState.MULTI_MODEL
        assert result.total == 0
        assert [o.model for o in result.options] == ["Golf", "Polo"]
        assert result.options[0].variant_labels == ["base variant", "GTI"]
        assert result.options[1].variant_labels == ["base variant", "Cross"]

    def test_model_substring_spanning_models_asks_for_model(self):
        catalog = CatalogIndex([
            make_product("G2", "Tow Bar", "VW", "Golf Plus", ""),
            make_product("G1", "Tow Bar", "VW", "Golf", "Variant"),
        ])
        result = MatchEngine(catalog).search("tow bar", Fitment(brand="VW", model="Golf"))

        assert result.state is MatchState.MULTI_MODEL
        assert [o.model for o in result.options] == ["Golf", "Golf Plus"]

    def test_multiple_variants_ask_for_variant(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        result = engine.search("brake pad", Fitment(brand="VW", model="Golf"))

        assert result.state is MatchState.MULTI_VARIANT
        assert result.total == 0
        assert result.model == "Golf"
        assert result.options[0].variant_labels == ["base variant", "GTI"]

    def test_named_variants_sorted_alphabetically(self):
        catalog = CatalogIndex([
            make_product("T2", "Tow Bar", "Citroën", "C5", "Tourer"),
            make_product("T1", "Tow Bar", "Citroën", "C5", "Break"),
        ])
        result = MatchEngine(catalog).search(
            "tow bar", resolve_fitment(vehicle_text="citroen c5")
        )
        assert result.state is MatchState.MULTI_VARIANT
        assert result.options[0].variant_labels == ["Break", "Tourer"]

    def test_supplied_variant_resolves(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        result = engine.search("brake pad", Fitment(brand="VW", model="Golf", variant="GTI"))

        assert result.state is MatchState.RESOLVED
        assert result.total == 1
        assert result.products[0].product_number == "A2"

    def test_single_combination_resolves(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        result = engine.search("brake disc", Fitment(brand="VW", model="Golf"))

        assert result.state is MatchState.RESOLVED
        assert [p.product_number for p in result.products] == ["B1"]

    def test_same_fitment_different_skus_resolves(self):
        catalog = CatalogIndex([
            make_product("A1", "Brake Pad", "VW", "Golf", ""),
            make_product("A2", "Brake Pad", "VW", "Golf", ""),
        ])
        result = MatchEngine(catalog).search("brake pad", Fitment(brand="VW", model="Golf"))
        assert result.state is MatchState.RESOLVED
        assert result.total == 2

    def test_without_brand_no_disambiguation(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        result = engine.search("brake pad", Fitment())

        assert result.state is MatchState.RESOLVED
        assert result.total == 5

    def test_no_match_is_resolved_empty(self, fitment_catalog):
        engine = MatchEngine(fitment_catalog)
        result = engine.search("wiper blade", Fitment(brand="VW", model="Golf"))

        assert result.state is MatchState.RESOLVED
        assert result.total == 0

    def test_rows_without_model_count_towards_variants(self):
        catalog = CatalogIndex([
            make_product("A1", "Brake Pad", "VW", "Golf", ""),
            make_product("A2", "Brake Pad", "VW", "", "GTI"),
        ])
        result = MatchEngine(catalog).search("brake pad", Fitment(brand="VW"))

        assert result.state is MatchState.MULTI_VARIANT
        assert result.model == "Golf"
        assert result.options[0].variant_labels == ["base variant", "GTI"]

    def test_rows_without_model_only_resolve(self):
        catalog = CatalogIndex([
            make_product("A1", "Brake Pad", "VW", "", ""),
            make_product("A2", "Brake Pad", "VW", "", "GTI"),
        ])
        result = MatchEngine(catalog).search("brake pad", Fitment(brand="VW"))

        assert result.state is MatchState.RESOLVED
        assert result.total == 2
