
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from shopware_mcp_server.main import create_app
from shopware_mcp_server.api.dependencies import get_embedder, get_shopware_client
from shopware_mcp_server.config import settings
from shopware_mcp_server.embeddings.embedder import Embedder, EmbeddingError
from shopware_mcp_server.embeddings.index import ProductVectorIndex
from shopware_mcp_server.embeddings.models import IndexedProduct

from conftest import FakeShopware, make_order


@pytest.fixture
def vector_index(tmp_path):
    index = ProductVectorIndex(
        index_path=str(tmp_path / "index.bin"),
        meta_path=str(tmp_path / "meta.json"),
    )
    index.rebuild(
        [
            IndexedProduct(
                product_number="V1",
                product_name="Tow Bar",
                vehicle_brand="VW",
                vehicle_model="Golf",
                vehicle_variant="",
            ),
        ],
        [[1.0, 0.0]],
    )
    return index


@pytest.fixture
def mock_embedder():
    mock = AsyncMock(spec=Embedder)
    mock.embed_one.return_value = [1.0, 0.0]
    return mock


@pytest.fixture
def shopware():
    return FakeShopware(
        products={"total": 1, "data": [{"productNumber": "A1", "name": "Tow Bar", "stock": 4}]},
        orders={"total": 1, "data": [make_order("10001")]},
    )


@pytest.fixture
def client(fitment_catalog, vector_index, mock_embedder, shopware):
    app = create_app(catalog=fitment_catalog, vector_index=vector_index)
    app.dependency_overrides[get_embedder] = lambda: mock_embedder
    app.dependency_overrides[get_shopware_client] = lambda: shopware

    # No context manager: startup would load the configured CSV file
    yield TestClient(app)

    app.dependency_overrides = {}


def test_list_tools(client):
    response = client.get("/tools")
    assert response.status_code == 200

    names = [tool["function"]["name"] for tool in response.json()["tools"]]
    assert names == [
        "search-product-catalog",
        "search-product-vector",
        "search-product-number",
        "get-stock-level",
        "search-orders",
        "check-order-status",
        "check-payment-status",
        "get-order-items",
    ]


def test_call_catalog_tool(client):
    response = client.post(
        "/tools/call",
        json={
            "name": "search-product-catalog",
            "arguments": {"name": "brake pad", "vehicleText": "VW Golf GTI"},
        },
    )
    assert response.status_code == 200

    data = response.json()
    assert data["structuredContent"]["total"] == 1
    assert data["structuredContent"]["products"][0]["productNumber"] == "A2"
    assert data["content"][0]["type"] == "text"
    assert data["content"][0]["text"].startswith("Found one product:")


def test_call_catalog_tool_asks_for_model(client):
    response = client.post(
        "/tools/call",
        json={
            "name": "search-product-catalog",
            "arguments": {"name": "brake pad", "vehicleBrand": "VW", "limit": "5"},
        },
    )
    assert response.status_code == 200

    data = response.json()
    assert data["structuredContent"] == {"total": 0, "products": []}
    assert "Which model and variant is your vehicle?" in data["content"][0]["text"]


def test_unknown_tool_is_404(client):
    response = client.post("/tools/call", json={"name": "delete-orders", "arguments": {}})
    assert response.status_code == 404


def test_missing_required_argument_is_422(client):
    response = client.post(
        "/tools/call",
        json={"name": "search-product-vector", "arguments": {"name": "tow bar"}},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "invalid_arguments"


def test_search_catalog_route(client):
    response = client.post(
        "/search/catalog",
        json={"name": "anhängerkupplung", "vehicleBrand": "citroen", "vehicleModel": "C5"},
    )
    assert response.status_code == 200
    assert "citroen C5 variants" in response.json()["content"][0]["text"]


def test_search_vector_route(client, mock_embedder):
    response = client.post(
        "/search/vector",
        json={"name": "tow bar", "vehicleBrand": "vw", "vehicleModel": "golf"},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["structuredContent"]["total"] == 1
    assert data["structuredContent"]["products"][0]["productNumber"] == "V1"
    mock_embedder.embed_one.assert_awaited_once_with("tow bar")


def test_search_vector_upstream_failure_is_200(client, mock_embedder):
    mock_embedder.embed_one.side_effect = EmbeddingError("Embedding generation failed: ConnectError")

    response = client.post(
        "/search/vector",
        json={"name": "tow bar", "vehicleBrand": "VW", "vehicleModel": "Golf"},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["structuredContent"] == {"total": 0, "products": []}
    assert data["content"][0]["text"].startswith("Vector search failed:")


def test_health_reports_catalog_and_index(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ok"
    assert data["catalog_products"] == 8
    assert data["vector_index"]["status"] == "connected"


def test_health_degraded_without_index(fitment_catalog, tmp_path):
    index = ProductVectorIndex(
        index_path=str(tmp_path / "none.bin"),
        meta_path=str(tmp_path / "none.json"),
    )
    client = TestClient(create_app(catalog=fitment_catalog, vector_index=index))

    data = client.get("/health").json()
    assert data["status"] == "degraded"
    assert data["vector_index"]["status"] == "not_loaded"


def test_call_search_orders_tool(client):
    response = client.post(
        "/tools/call",
        json={"name": "search-orders", "arguments": {"orderNumber": "10001"}},
    )
    assert response.status_code == 200

    data = response.json()
    order = data["structuredContent"]["orders"][0]
    assert data["structuredContent"]["total"] == 1
    assert order["customer"]["orderNumber"] == "10001"
    assert order["shipping"]["trackingCodes"] == ["DHL123"]
    assert data["content"][0]["text"].startswith("Order #10001 shipping status: Shipped")


def test_call_product_number_tool_keeps_backend_fields(client):
    response = client.post(
        "/tools/call",
        json={"name": "search-product-number", "arguments": {"productNumber": "A1"}},
    )
    assert response.status_code == 200

    product = response.json()["structuredContent"]["products"][0]
    assert product == {
        "productNumber": "A1",
        "name": "Tow Bar",
        "description": "",
        "availableStock": 4,
    }


def test_order_tool_rejects_out_of_range_limit(client):
    response = client.post(
        "/tools/call",
        json={"name": "search-orders", "arguments": {"limit": 500}},
    )
    assert response.status_code == 422


def test_startup_installs_unloaded_index_once(fitment_catalog, mock_embedder, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "vector_index_path", str(tmp_path / "none.bin"))
    monkeypatch.setattr(settings, "vector_meta_path", str(tmp_path / "none.json"))

    app = create_app(catalog=fitment_catalog)
    app.dependency_overrides[get_embedder] = lambda: mock_embedder

    with TestClient(app) as client:
        index = app.state.vector_index
        assert index is not None
        assert not index.is_ready

        response = client.post(
            "/search/vector",
            json={"name": "tow bar", "vehicleBrand": "VW", "vehicleModel": "Golf"},
        )
        assert response.status_code == 200
        assert "not loaded" in response.json()["content"][0]["text"]
        assert app.state.vector_index is index

        health = client.get("/health").json()
        assert health["status"] == "degraded"
