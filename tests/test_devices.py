from iot_inventory.database import settings

API = settings.api_prefix

MISSING_ID = "f" * 32


def test_create_device_expands_references(client, make_user, make_zone, make_sensor):
    owner = make_user(name="Owner", role="technician")
    zone = make_zone(name="Lab", description="Main lab")
    sensor = make_sensor(type="humidity", model="SHT31")

    response = client.post(f"{API}/devices", json={
        "serialNumber": "SN-1",
        "model": "ESP32",
        "ownerId": owner["id"],
        "zoneId": zone["id"],
        "sensors": [sensor["id"]],
    })
    assert response.status_code == 201
    device = response.json()
    assert device["status"] == "active"
    assert device["installedAt"]
    assert device["owner"] == {
        "id": owner["id"], "name": "Owner", "email": owner["email"], "role": "technician",
    }
    assert device["zone"] == {"id": zone["id"], "name": "Lab", "description": "Main lab"}
    assert device["sensors"] == [{"id": sensor["id"], "type": "humidity", "model": "SHT31"}]
    assert "ownerId" not in device and "zoneId" not in device


def test_get_and_list_return_expanded_summaries(client, make_device):
    device = make_device()
    fetched = client.get(f"{API}/devices/{device['id']}").json()
    assert fetched == device

    listing = client.get(f"{API}/devices").json()
    assert [d["id"] for d in listing] == [device["id"]]
    assert set(listing[0]["owner"]) == {"id", "name", "email", "role"}
    assert "password" not in listing[0]["owner"]


def test_unknown_owner_or_zone_is_rejected(client, make_user, make_zone):
    owner = make_user()
    zone = make_zone()

    no_owner = client.post(f"{API}/devices", json={
        "serialNumber": "SN-X", "model": "M", "ownerId": MISSING_ID, "zoneId": zone["id"],
    })
    assert no_owner.status_code == 400
    assert no_owner.json()["error"] == "ReferenceNotFound"
    assert no_owner.json()["kind"] == "owner"

    no_zone = client.post(f"{API}/devices", json={
        "serialNumber": "SN-X", "model": "M", "ownerId": owner["id"], "zoneId": MISSING_ID,
    })
    assert no_zone.status_code == 400
    assert no_zone.json()["kind"] == "zone"

    no_sensor = client.post(f"{API}/devices", json={
        "serialNumber": "SN-X", "model": "M", "ownerId": owner["id"], "zoneId": zone["id"],
        "sensors": [MISSING_ID],
    })
    assert no_sensor.status_code == 400
    assert no_sensor.json()["kind"] == "sensor"

    assert client.get(f"{API}/devices").json() == []


def test_malformed_reference_ids_are_400(client, make_zone):
    zone = make_zone()
    response = client.post(f"{API}/devices", json={
        "serialNumber": "SN-Y", "model": "M", "ownerId": "12345", "zoneId": zone["id"],
    })
    assert response.status_code == 400
    assert "ownerId" in response.json()["errors"]


def test_invalid_status_is_rejected(client, make_user, make_zone):
    response = client.post(f"{API}/devices", json={
        "serialNumber": "SN-Z", "model": "M", "status": "broken",
        "ownerId": make_user()["id"], "zoneId": make_zone()["id"],
    })
    assert response.status_code == 400
    assert "status" in response.json()["errors"]


def test_duplicate_serial_number_conflicts(client, make_device):
    device = make_device(serialNumber="SN-DUP")
    response = client.post(f"{API}/devices", json={
        "serialNumber": "SN-DUP",
        "model": "Other",
        "ownerId": device["owner"]["id"],
        "zoneId": device["zone"]["id"],
    })
    assert response.status_code == 409
    assert response.json()["field"] == "serialNumber"


def test_update_reference_to_missing_zone_leaves_device_unchanged(client, make_device):
    device = make_device()
    response = client.patch(f"{API}/devices/{device['id']}", json={"zoneId": MISSING_ID, "model": "New"})
    assert response.status_code == 400
    assert response.json()["kind"] == "zone"

    current = client.get(f"{API}/devices/{device['id']}").json()
    assert current["zone"]["id"] == device["zone"]["id"]
    assert current["model"] == device["model"]


def test_update_moves_device_to_another_zone(client, make_device, make_zone):
    device = make_device()
    target = make_zone(name="Target")
    response = client.patch(f"{API}/devices/{device['id']}", json={"zoneId": target["id"], "status": "offline"})
    assert response.status_code == 200
    assert response.json()["zone"]["name"] == "Target"
    assert response.json()["status"] == "offline"
    assert response.json()["serialNumber"] == device["serialNumber"]


def test_empty_patch_returns_current_device(client, make_device):
    device = make_device()
    response = client.patch(f"{API}/devices/{device['id']}", json={})
    assert response.status_code == 200
    assert response.json() == device


def test_filters_by_status_and_zone(client, make_device, make_zone):
    zone = make_zone()
    in_zone = make_device(zoneId=zone["id"], status="maintenance")
    make_device(status="offline")

    by_status = client.get(f"{API}/devices/status/maintenance").json()
    assert [d["id"] for d in by_status] == [in_zone["id"]]

    by_zone = client.get(f"{API}/devices/zone/{zone['id']}").json()
    assert [d["id"] for d in by_zone] == [in_zone["id"]]

    assert client.get(f"{API}/devices/status/exploded").status_code == 400


def test_delete_device_with_sensors_is_blocked_until_detached(client, make_device, make_sensor):
    sensor = make_sensor()
    device = make_device(sensors=[sensor["id"]])

    blocked = client.delete(f"{API}/devices/{device['id']}")
    assert blocked.status_code == 409
    assert blocked.json()["kind"] == "sensors"
    assert blocked.json()["count"] == 1

    detached = client.patch(f"{API}/devices/{device['id']}", json={"sensors": []})
    assert detached.status_code == 200
    assert detached.json()["sensors"] == []

    deleted = client.delete(f"{API}/devices/{device['id']}")
    assert deleted.status_code == 200
    assert deleted.json()["deleted"]["serialNumber"] == device["serialNumber"]
    assert client.get(f"{API}/devices/{device['id']}").status_code == 404
    # the sensor itself survives
    assert client.get(f"{API}/sensors/{sensor['id']}").status_code == 200


def test_malformed_device_id_is_400(client):
    assert client.get(f"{API}/devices/123").status_code == 400
    assert client.delete(f"{API}/devices/{MISSING_ID}").status_code == 404
