from iot_inventory.database import settings

API = settings.api_prefix


def test_create_and_fetch_round_trip(client):
    payload = {"name": "Laboratorio A", "description": "Ground floor", "isActive": True}
    created = client.post(f"{API}/zones", json=payload)
    assert created.status_code == 201

    fetched = client.get(f"{API}/zones/{created.json()['id']}").json()
    for key, value in payload.items():
        assert fetched[key] == value
    assert fetched["id"] == created.json()["id"]
    assert fetched["createdAt"] and fetched["updatedAt"]


def test_description_is_optional(client):
    response = client.post(f"{API}/zones", json={"name": "Bare"})
    assert response.status_code == 201
    assert response.json()["description"] is None


def test_duplicate_zone_name_conflicts(client, make_zone):
    make_zone(name="Azotea")
    response = client.post(f"{API}/zones", json={"name": "Azotea"})
    assert response.status_code == 409
    assert response.json()["field"] == "name"


def test_missing_name_is_a_validation_failure(client):
    response = client.post(f"{API}/zones", json={"description": "no name"})
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationFailure"
    assert "name" in response.json()["errors"]


def test_active_zones(client, make_zone):
    active = make_zone(name="Open")
    make_zone(name="Closed", isActive=False)
    names = [z["name"] for z in client.get(f"{API}/zones/active").json()]
    assert names == [active["name"]]


def test_patch_changes_only_supplied_fields(client, make_zone):
    zone = make_zone(name="Old", description="keep me")
    response = client.patch(f"{API}/zones/{zone['id']}", json={"name": "New"})
    assert response.status_code == 200
    assert response.json()["name"] == "New"
    assert response.json()["description"] == "keep me"


def test_patch_with_null_required_field_is_rejected(client, make_zone):
    zone = make_zone()
    response = client.patch(f"{API}/zones/{zone['id']}", json={"isActive": None})
    assert response.status_code == 400
    assert client.get(f"{API}/zones/{zone['id']}").json()["isActive"] is True


def test_delete_zone_with_devices_is_blocked(client, make_zone, make_device):
    zone = make_zone()
    make_device(zoneId=zone["id"])
    make_device(zoneId=zone["id"])

    response = client.delete(f"{API}/zones/{zone['id']}")
    assert response.status_code == 409
    assert response.json()["kind"] == "devices"
    assert response.json()["count"] == 2
    assert len(client.get(f"{API}/devices/zone/{zone['id']}").json()) == 2


def test_delete_empty_zone(client, make_zone):
    zone = make_zone(name="Temporary", description="gone soon")
    response = client.delete(f"{API}/zones/{zone['id']}")
    assert response.status_code == 200
    assert response.json()["deleted"] == {"id": zone["id"], "name": "Temporary", "description": "gone soon"}
    assert client.get(f"{API}/zones/{zone['id']}").status_code == 404
