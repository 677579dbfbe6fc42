from fastapi.testclient import TestClient
import asyncio
import pytest

from sommelier.db.directory import get_directory
from sommelier.main import app
from sommelier.schemas.tenant import Tenant

client = TestClient(app)


@pytest.fixture(autouse=True)
def override_directory(directory):
    app.dependency_overrides[get_directory] = lambda: directory
    yield
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_login(palate_menu):
    response = client.post("/auth/login", json={"code": "4821"})

    assert response.status_code == 200
    data = response.json()
    assert data["tenantId"] == "palate"
    assert data["displayName"] == "Palate"
    assert data["theme"] == {"primary": "#1e293b"}
    assert data["menu"] == palate_menu
    assert data["menuVersion"] == 0


def test_login_blank_code():
    response = client.post("/auth/login", json={"code": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter an access code."


def test_login_unknown_code():
    response = client.post("/auth/login", json={"code": "0000"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid access code."


def test_get_menu():
    response = client.get("/tenants/harbour/menu")
    assert response.status_code == 200
    assert response.json()["restaurantName"] == "Harbour House"
    assert response.json()["menu"][0]["items"][0]["dish"] == "Cod Loin"

    assert client.get("/tenants/ghost/menu").status_code == 404


def test_save_menu(palate_menu):
    palate_menu[0]["items"][0]["pairings"]["byGlass"]["note"] = "Oyster shell"

    response = client.put(
        "/tenants/palate/menu",
        json={"menu": palate_menu, "expectedVersion": 0},
        headers={"X-Access-Code": "4821"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "menuVersion": 1}
    reloaded = client.get("/tenants/palate/menu").json()
    assert reloaded["menu"] == palate_menu
    assert reloaded["menuVersion"] == 1


def test_save_menu_reports_every_violation(palate_menu):
    del palate_menu[0]["items"][0]["pairings"]["midRange"]
    palate_menu[1]["items"][0]["dish"] = ""

    response = client.put("/tenants/palate/menu", json={"menu": palate_menu}, headers={"X-Access-Code": "4821"})

    assert response.status_code == 422
    locs = [v["loc"] for v in response.json()["violations"]]
    assert locs == ["menu.0.items.0.pairings.midRange", "menu.1.items.0.dish"]
    assert client.get("/tenants/palate/menu").json()["menuVersion"] == 0


def test_save_menu_requires_own_access_code(palate_menu):
    response = client.put("/tenants/palate/menu", json={"menu": palate_menu})
    assert response.status_code == 401

    response = client.put("/tenants/palate/menu", json={"menu": palate_menu}, headers={"X-Access-Code": "7310"})
    assert response.status_code == 401


def test_save_menu_stale_version(palate_menu):
    headers = {"X-Access-Code": "4821"}
    assert client.put("/tenants/palate/menu", json={"menu": palate_menu, "expectedVersion": 0},
                      headers=headers).status_code == 200

    response = client.put("/tenants/palate/menu", json={"menu": palate_menu, "expectedVersion": 0},
                          headers=headers)
    assert response.status_code == 409


def test_save_menu_replaces_a_broken_stored_menu(directory, palate_menu):
    broken = [{"category": "Starters", "items": [{"dish": "Tartare", "price": "185", "pairings": {}}]}]
    asyncio.run(directory.upsert(Tenant(id="palate", name="Palate", access_code="4821", menu=broken)))
    assert client.post("/auth/login", json={"code": "4821"}).status_code == 401

    response = client.put("/tenants/palate/menu", json={"menu": palate_menu}, headers={"X-Access-Code": "4821"})

    assert response.status_code == 200
    reloaded = client.get("/tenants/palate/menu")
    assert reloaded.status_code == 200
    assert reloaded.json()["menu"] == palate_menu


def test_search():
    response = client.get("/tenants/palate/menu/search", params={"q": "nebbiolo"})

    assert response.status_code == 200
    [category] = response.json()["categories"]
    assert category["name"] == "Mains"
    assert category["originalIndex"] == 1
    assert category["items"][0]["originalIndex"] == 0
    assert "original_index" not in category
    assert category["items"][0]["item"]["dish"] == "Lamb Shoulder"


def test_dishes():
    response = client.get("/tenants/palate/dishes")
    assert response.status_code == 200
    assert response.json()[0] == {"category": "Starters", "dish": "Tartare", "label": "Tartare — 185 NOK"}


def test_pairing(palate_menu):
    response = client.get("/tenants/palate/pairing", params={"dish": "Tartare", "tier": "midRange"})

    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == "midRange"
    assert data["tierLabel"] == "Mid-Range"
    assert data["pairing"] == palate_menu[0]["items"][0]["pairings"]["midRange"]


def test_pairing_defaults_to_by_glass():
    response = client.get("/tenants/palate/pairing", params={"dish": "Tartare"})
    assert response.json()["pairing"]["name"] == "Chablis"


def test_pairing_unknown_dish_or_tier():
    assert client.get("/tenants/palate/pairing", params={"dish": "Pavlova"}).status_code == 404
    assert client.get("/tenants/palate/pairing", params={"dish": "Tartare", "tier": "magnum"}).status_code == 422

