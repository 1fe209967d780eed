"""
Response Rendering Tests

Text and structured output for every result cardinality and outcome kind.
"""

import pytest

from shopware_mcp_server.catalog.index import CatalogIndex
from shopware_mcp_server.core.errors import ErrorKind
from shopware_mcp_server.matching.engine import MatchEngine
from shopware_mcp_server.matching.fitment import Fitment
from shopware_mcp_server.matching.models import CatalogMatch, SearchError
from shopware_mcp_server.tools.responses import (
    clamp_limit,
    clean_product_name,
    render_outcome,
)

from conftest import make_product


def test_no_products_message():
    response = render_outcome(CatalogMatch(query="wiper"))
    payload = response.model_dump(by_alias=True)

    assert payload["structuredContent"] == {"total": 0, "products": []}
    assert response.text == 'No products found for "wiper".'


def test_single_product_summary():
    catalog = CatalogIndex([make_product("A1", "Brake Pad Front", "VW", "Golf", "")])
    match = MatchEngine(catalog).search("brake pad", Fitment(brand="VW", model="Golf"))
    response = render_outcome(match, limit=20)

    assert response.structured_content.total == 1
    assert response.text.startswith("Found one product: Brake Pad Front for VW Golf  (A1)")

    product = response.model_dump(by_alias=True)["structuredContent"]["products"][0]
    assert product == {
        "productNumber": "A1",
        "name": "Brake Pad Front",
        "vehicleBrand": "VW",
        "vehicleModel": "Golf",
        "vehicleVariant": "",
    }


def test_manufacturer_prefix_is_stripped():
    assert clean_product_name("JAEGER automotive Tow Bar") == "Tow Bar"
    assert clean_product_name("jaeger AUTOMOTIVE   Tow Bar ") == "Tow Bar"
    assert clean_product_name("Tow Bar JAEGER automotive") == "Tow Bar JAEGER automotive"
    assert clean_product_name("ACME Tow Bar", prefix="ACME") == "Tow Bar"


def test_identical_fitments_grouped_in_text_only():
    catalog = CatalogIndex([
        make_product("A1", "JAEGER automotive Brake Pad", "VW", "Golf", "GTI"),
        make_product("A2", "Brake Pad", "VW", "Golf", "GTI"),
    ])
    match = MatchEngine(catalog).search("brake pad", Fitment(variant="GTI"))
    response = render_outcome(match, limit=20)

    assert response.structured_content.total == 2
    assert len(response.structured_content.products) == 2
    assert response.text.startswith("Found 2 items for 'brake pad':")
    assert "Brake Pad for VW Golf GTI (A1, A2)" in response.text
    assert response.text.count("Brake Pad for") == 1


def test_limit_caps_products_but_not_total():
    catalog = CatalogIndex([
        make_product(f"P{i}", "Oil Filter", "VW", "Golf", f"V{i}") for i in range(5)
    ])
    match = MatchEngine(catalog).search("oil filter", Fitment())
    response = render_outcome(match, limit=2)

    assert response.structured_content.total == 5
    assert [p.product_number for p in response.structured_content.products] == ["P0", "P1"]
    assert "Found 5 items" in response.text
    assert "(P2)" not in response.text


def test_model_question(fitment_catalog):
    match = MatchEngine(fitment_catalog).search("brake pad", Fitment(brand="VW"))
    response = render_outcome(match)

    assert response.model_dump(by_alias=True)["structuredContent"] == {"total": 0, "products": []}
    assert response.text.startswith("I found brake pad for these VW models:")
    assert "Golf (base variant, GTI)" in response.text
    assert "Polo (base variant, Cross)" in response.text
    assert response.text.index("Golf") < response.text.index("Polo")
    assert response.text.endswith("Which model and variant is your vehicle?")


def test_variant_question(fitment_catalog):
    match = MatchEngine(fitment_catalog).search("brake pad", Fitment(brand="VW", model="Golf"))
    response = render_outcome(match)

    assert response.structured_content.total == 0
    assert response.structured_content.products == []
    assert "VW Golf variants" in response.text
    assert "base variant" in response.text
    assert "GTI" in response.text
    assert response.text.endswith("Can you specify which variant your vehicle is?")


def test_error_rendered_as_text():
    error = SearchError(
        query="brake pad",
        kind=ErrorKind.UPSTREAM,
        message="Embedding generation failed: ConnectError",
        source="Vector search",
    )
    response = render_outcome(error)

    assert response.structured_content.total == 0
    assert response.text == "Vector search failed: Embedding generation failed: ConnectError"


@pytest.mark.parametrize(
    "limit, expected",
    [(None, 20), (0, 1), (-5, 1), (7, 7), (100, 100), (500, 100)],
)
def test_clamp_limit(limit, expected):
    assert clamp_limit(limit) == expected
