from fastapi.testclient import TestClient

from api import app


client = TestClient(app)


def test_collect_endpoint(shop_root):
	response = client.post("/collect", json={"source": str(shop_root), "entry_markers": ["Controller"]})
	assert response.status_code == 200
	body = response.json()
	assert body["entry_types"] == ["shop.services.OrderService"]
	assert body["models"] == [
		"shop.models.Entity",
		"shop.models.LineItem",
		"shop.models.Order",
		"shop.models.Person",
	]
	order = next(s for s in body["schemas"] if s["$id"] == "shop.models.Order")
	assert order["properties"]["customer"] == {"$ref": "shop.models.Person"}


def test_collect_endpoint_rejects_missing_source(tmp_path):
	response = client.post("/collect", json={"source": str(tmp_path / "nope"), "entry_markers": ["Controller"]})
	assert response.status_code == 400


def test_collect_endpoint_validates_body():
	response = client.post("/collect", json={"source": "."})
	assert response.status_code == 422
