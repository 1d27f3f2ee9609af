"""API tests: locations endpoints using test DB (client fixture overrides get_db)."""
import pytest

from models.location import Location

pytestmark = pytest.mark.api


def _payload(**overrides) -> dict:
    data = {
        "id": "loc-new",
        "name": "Paragliding San Gil",
        "description": "Parapente en tándem sobre el Cañón del Chicamocha.",
        "address": "Mesa de Los Santos, San Gil",
        "photo": "paragliding.jpg",
        "maps_url": "https://maps.google.com/?q=6.56,-73.135",
        "waze_url": "https://waze.com/ul?ll=6.56,-73.135&navigate=yes",
        "tags": ["adrenalina", "vistas panorámicas"],
        "category": "aventura",
        "subcategory": "actividades-extremas",
        "coordinates": [6.56, -73.135],
    }
    data.update(overrides)
    return data


def test_list_locations_empty(client):
    r = client.get("/api/locations")
    assert r.status_code == 200
    assert r.json() == []


def test_list_and_filter_locations(client, categories, make_location):
    make_location("loc-1", name="Restaurante Jenny", subcategory_id="lunch")
    make_location("loc-2", name="Café del Río", subcategory_id="cafes", tags=["café"])
    make_location("loc-3", name="Rafting", category_id="aventura", subcategory_id="actividades-extremas")
    assert [loc["id"] for loc in client.get("/api/locations").json()] == ["loc-2", "loc-3", "loc-1"]
    r = client.get("/api/locations", params={"category": "comidas"})
    assert [loc["id"] for loc in r.json()] == ["loc-2", "loc-1"]
    r = client.get("/api/locations", params={"category": "comidas", "subcategory": "cafes"})
    assert [loc["id"] for loc in r.json()] == ["loc-2"]
    r = client.get("/api/locations", params={"q": "CAFÉ"})
    assert [loc["id"] for loc in r.json()] == ["loc-2"]


def test_get_location(client, make_location):
    make_location("loc-1")
    r = client.get("/api/locations/loc-1")
    assert r.status_code == 200
    data = r.json()
    assert data["coordinates"] == [6.556, -73.133]
    assert data["category"] == "comidas"
    assert data["subcategory"] == "lunch"


def test_get_location_404(client):
    assert client.get("/api/locations/unknown-loc").status_code == 404


def test_malformed_location_returns_500_with_kind(client, db_session, make_location):
    make_location("loc-bad")
    db_session.get(Location, "loc-bad").tags = []
    db_session.commit()
    r = client.get("/api/locations/loc-bad")
    assert r.status_code == 500
    assert r.json()["kind"] == "malformed_record"


def test_create_location_requires_admin(client, categories):
    assert client.post("/api/locations", json=_payload()).status_code == 401


def test_create_location(client, categories, auth_headers):
    r = client.post("/api/locations", json=_payload(), headers=auth_headers)
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["id"] == "loc-new"
    assert data["coordinates"] == [6.56, -73.135]
    assert client.get("/api/locations/loc-new").json()["name"] == "Paragliding San Gil"
    assert [loc["id"] for loc in client.get("/api/locations").json()] == ["loc-new"]


def test_create_location_generates_id(client, categories, auth_headers):
    payload = _payload()
    del payload["id"]
    r = client.post("/api/locations", json=payload, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["id"]


def test_create_location_duplicate_id(client, categories, auth_headers, make_location):
    make_location("loc-new")
    r = client.post("/api/locations", json=_payload(), headers=auth_headers)
    assert r.status_code == 409


@pytest.mark.parametrize(
    "overrides",
    [
        {"category": "hospedajes", "subcategory": None},
        {"category": "aventura", "subcategory": "lunch"},
    ],
)
def test_create_location_bad_references(client, categories, auth_headers, overrides):
    r = client.post("/api/locations", json=_payload(**overrides), headers=auth_headers)
    assert r.status_code == 422


def test_create_location_validation(client, categories, auth_headers):
    r = client.post("/api/locations", json=_payload(tags=[], coordinates=[120, 0]), headers=auth_headers)
    assert r.status_code == 422


def test_list_sees_new_location_after_cached_read(client, categories, auth_headers, make_location):
    """A write invalidates the cached list."""
    make_location("loc-1")
    assert len(client.get("/api/locations").json()) == 1
    client.post("/api/locations", json=_payload(), headers=auth_headers)
    assert len(client.get("/api/locations").json()) == 2


def test_update_location(client, categories, auth_headers, make_location):
    make_location("loc-1")
    client.get("/api/locations/loc-1")
    r = client.patch(
        "/api/locations/loc-1",
        json={"name": "Jenny's", "coordinates": [6.5, -73.1], "custom_url": "https://reservas.example.com/jenny"},
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    assert client.get("/api/locations/loc-1").json()["name"] == "Jenny's"
    assert r.json()["coordinates"] == [6.5, -73.1]
    assert r.json()["subcategory"] == "lunch"


def test_update_category_clears_subcategory(client, categories, auth_headers, make_location):
    make_location("loc-1")
    r = client.patch("/api/locations/loc-1", json={"category": "aventura"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["category"] == "aventura"
    assert r.json()["subcategory"] is None


def test_update_subcategory_must_belong(client, categories, auth_headers, make_location):
    make_location("loc-1")
    r = client.patch("/api/locations/loc-1", json={"subcategory": "naturaleza"}, headers=auth_headers)
    assert r.status_code == 422
    r = client.patch("/api/locations/loc-1", json={"subcategory": ""}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["subcategory"] is None


def test_update_rejects_null_required_field(client, categories, auth_headers, make_location):
    make_location("loc-1")
    r = client.patch("/api/locations/loc-1", json={"name": None}, headers=auth_headers)
    assert r.status_code == 422


@pytest.mark.parametrize(
    "body",
    [{"name": "   "}, {"description": " " * 12}, {"address": "\t\t\t\t\t"}, {"photo": " "}, {"category": "  "}],
)
def test_update_rejects_blank_text_and_reads_stay_healthy(client, categories, auth_headers, make_location, body):
    make_location("loc-1")
    assert client.get("/api/locations").status_code == 200
    r = client.patch("/api/locations/loc-1", json=body, headers=auth_headers)
    assert r.status_code == 422
    r = client.get("/api/locations")
    assert r.status_code == 200
    assert [loc["name"] for loc in r.json()] == ["Restaurante Jenny"]
    assert client.get("/api/locations/loc-1").json()["photo"] == "restaurant-jenny.jpg"
    assert client.get("/api/explorer").status_code == 200


def test_update_strips_text_fields(client, categories, auth_headers, make_location):
    make_location("loc-1")
    r = client.patch("/api/locations/loc-1", json={"name": "  Donde Jenny  "}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Donde Jenny"


def test_update_location_404(client, auth_headers):
    assert client.patch("/api/locations/nope", json={"name": "Nada"}, headers=auth_headers).status_code == 404


def test_update_photo_removes_old_upload(client, categories, auth_headers, make_location, blob_store):
    old = blob_store.upload(b"\x89PNG....", "image/png", location_id="loc-1")
    make_location("loc-1", photo=old.download_url)
    r = client.patch("/api/locations/loc-1", json={"photo": "cafe-del-rio.jpg"}, headers=auth_headers)
    assert r.status_code == 200
    assert not (blob_store.root / old.full_path).exists()


def test_delete_location(client, auth_headers, make_location):
    make_location("loc-1")
    make_location("loc-2", name="Otro")
    client.get("/api/locations/loc-1")
    r = client.delete("/api/locations/loc-1", headers=auth_headers)
    assert r.status_code == 204
    assert client.get("/api/locations/loc-1").status_code == 404
    assert [loc["id"] for loc in client.get("/api/locations").json()] == ["loc-2"]


def test_delete_location_404(client, auth_headers):
    assert client.delete("/api/locations/unknown-loc", headers=auth_headers).status_code == 404


def test_export_locations(client, auth_headers, make_location):
    make_location("loc-1")
    assert client.get("/api/locations/export.json").status_code == 401
    r = client.get("/api/locations/export.json", headers=auth_headers)
    assert r.status_code == 200
    assert "locations-export.json" in r.headers["content-disposition"]
    assert [loc["id"] for loc in r.json()] == ["loc-1"]
