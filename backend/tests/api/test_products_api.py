"""API tests: merchandise products."""
import pytest

from repositories.product_repository import create_product

pytestmark = pytest.mark.api


def _product(db_session, name: str, price: str):
    return create_product(
        db_session,
        name=name,
        description=f"{name} de San Gil",
        price=price,
        image="tshirt-mockup.jpg",
        link_url="https://instagram.com/sangiltourism",
    )


def test_list_products(client, db_session):
    _product(db_session, "Camiseta de Aventura San Gil", "$25.000 COP")
    _product(db_session, "Sudadera Cañón del Chicamocha", "$45.000 COP")
    r = client.get("/api/products")
    assert r.status_code == 200
    assert [p["price"] for p in r.json()] == ["$25.000 COP", "$45.000 COP"]


def test_search_and_price_filters(client, db_session):
    _product(db_session, "Camiseta", "$25.000 COP")
    _product(db_session, "Sudadera", "$45.000 COP")
    assert [p["name"] for p in client.get("/api/products", params={"q": "sudadera"}).json()] == ["Sudadera"]
    r = client.get("/api/products", params={"min_price": 30000})
    assert [p["name"] for p in r.json()] == ["Sudadera"]
    r = client.get("/api/products", params={"max_price": 30000, "q": "camiseta"})
    assert [p["name"] for p in r.json()] == ["Camiseta"]
    assert client.get("/api/products", params={"min_price": 5, "max_price": 1}).status_code == 400


def test_get_product(client, db_session):
    product = _product(db_session, "Gorra", "$15.000 COP")
    assert client.get(f"/api/products/{product.id}").json()["name"] == "Gorra"
    assert client.get("/api/products/9999").status_code == 404


def test_product_crud_as_admin(client, auth_headers):
    body = {
        "name": "Termo San Gil",
        "description": "Termo de acero con logo",
        "price": "$30.000 COP",
        "image": "termo.jpg",
        "link_url": "https://instagram.com/sangiltourism",
    }
    assert client.post("/api/products", json=body).status_code == 401
    r = client.post("/api/products", json=body, headers=auth_headers)
    assert r.status_code == 201
    product_id = r.json()["id"]
    assert len(client.get("/api/products").json()) == 1
    r = client.patch(f"/api/products/{product_id}", json={"price": "$32.000 COP"}, headers=auth_headers)
    assert r.json()["price"] == "$32.000 COP"
    assert client.get("/api/products").json()[0]["price"] == "$32.000 COP"
    assert client.delete(f"/api/products/{product_id}", headers=auth_headers).status_code == 204
    assert client.get("/api/products").json() == []
    assert client.delete(f"/api/products/{product_id}", headers=auth_headers).status_code == 404


@pytest.mark.parametrize("field", ["name", "description", "price", "image", "link_url"])
def test_create_product_rejects_blank_text(client, auth_headers, field):
    body = {
        "name": "Termo San Gil",
        "description": "Termo de acero con logo",
        "price": "$30.000 COP",
        "image": "termo.jpg",
        "link_url": "https://instagram.com/sangiltourism",
        field: "   ",
    }
    assert client.post("/api/products", json=body, headers=auth_headers).status_code == 422
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == []


def test_update_product_rejects_blank_text(client, db_session, auth_headers):
    product = _product(db_session, "Gorra", "$15.000 COP")
    r = client.patch(f"/api/products/{product.id}", json={"price": "  "}, headers=auth_headers)
    assert r.status_code == 422
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json()[0]["price"] == "$15.000 COP"
    assert client.get(f"/api/products/{product.id}").status_code == 200


def test_product_text_is_stripped(client, auth_headers):
    body = {
        "name": "  Termo San Gil ",
        "description": "Termo de acero con logo",
        "price": " $30.000 COP ",
        "image": "termo.jpg",
        "link_url": "https://instagram.com/sangiltourism",
    }
    r = client.post("/api/products", json=body, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["name"] == "Termo San Gil"
    assert r.json()["price"] == "$30.000 COP"
