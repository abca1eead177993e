from concurrent.futures import ThreadPoolExecutor

from iot_inventory.database import settings
from iot_inventory.models import User
from iot_inventory.security import verify_password

API = settings.api_prefix

MISSING_ID = "0" * 32


def test_create_user_hides_password_and_normalizes_email(client):
    response = client.post(f"{API}/users", json={
        "name": "Ada Lovelace",
        "email": "Ada@Example.COM",
        "password": "secret123",
        "role": "admin",
    })
    assert response.status_code == 201
    body = response.json()
    assert "password" not in body
    assert body["email"] == "ada@example.com"
    assert body["role"] == "admin"
    assert body["isActive"] is True
    assert len(body["id"]) == 32
    assert body["createdAt"]


def test_role_defaults_to_viewer(client):
    response = client.post(f"{API}/users", json={
        "name": "Default Role", "email": "viewer@example.com", "password": "secret123",
    })
    assert response.status_code == 201
    assert response.json()["role"] == "viewer"


def test_password_is_stored_hashed(client, db, make_user):
    user = make_user(password="plaintext-pw")
    stored = db.get(User, user["id"])
    assert stored.password != "plaintext-pw"
    assert verify_password("plaintext-pw", stored.password)


def test_listing_and_fetch_never_include_password(client, make_user):
    created = make_user()
    listing = client.get(f"{API}/users").json()
    assert listing and all("password" not in u for u in listing)

    fetched = client.get(f"{API}/users/{created['id']}").json()
    assert "password" not in fetched
    assert fetched["email"] == created["email"]


def test_duplicate_email_is_case_insensitive(client, make_user):
    make_user(email="dup@example.com")
    response = client.post(f"{API}/users", json={
        "name": "Other", "email": "DUP@example.com", "password": "secret123",
    })
    assert response.status_code == 409
    assert response.json()["error"] == "DuplicateKeyFailure"
    assert response.json()["field"] == "email"


def test_concurrent_duplicate_email_only_one_wins(client):
    payload = {"name": "Racer", "email": "race@example.com", "password": "secret123"}

    def post(_):
        return client.post(f"{API}/users", json=payload).status_code

    with ThreadPoolExecutor(max_workers=2) as pool:
        statuses = sorted(pool.map(post, range(2)))
    assert statuses == [201, 409]


def test_invalid_payloads_are_rejected_with_400(client):
    bad_role = client.post(f"{API}/users", json={
        "name": "Bad Role", "email": "r@example.com", "password": "secret123", "role": "root",
    })
    assert bad_role.status_code == 400
    assert "role" in bad_role.json()["errors"]

    short_password = client.post(f"{API}/users", json={
        "name": "Short", "email": "s@example.com", "password": "123",
    })
    assert short_password.status_code == 400
    assert "password" in short_password.json()["errors"]

    bad_email = client.post(f"{API}/users", json={
        "name": "Mail", "email": "not-an-email", "password": "secret123",
    })
    assert bad_email.status_code == 400


def test_find_by_email(client, make_user):
    user = make_user(email="finder@example.com")
    response = client.get(f"{API}/users/email/FINDER@example.com")
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]
    assert client.get(f"{API}/users/email/nobody@example.com").status_code == 404


def test_partial_update_changes_only_supplied_fields(client, db, make_user):
    user = make_user(name="Before", role="viewer")
    response = client.patch(f"{API}/users/{user['id']}", json={"name": "After", "password": "newsecret"})
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "After"
    assert body["role"] == "viewer"
    assert body["email"] == user["email"]
    assert body["createdAt"] == user["createdAt"]
    assert "password" not in body
    assert verify_password("newsecret", db.get(User, user["id"]).password)


def test_update_to_taken_email_conflicts(client, make_user):
    make_user(email="taken@example.com")
    other = make_user()
    response = client.patch(f"{API}/users/{other['id']}", json={"email": "taken@example.com"})
    assert response.status_code == 409
    assert client.get(f"{API}/users/{other['id']}").json()["email"] == other["email"]


def test_delete_user_with_devices_is_blocked(client, make_user, make_device):
    owner = make_user()
    device = make_device(ownerId=owner["id"])

    response = client.delete(f"{API}/users/{owner['id']}")
    assert response.status_code == 409
    assert response.json()["kind"] == "devices"
    assert response.json()["count"] == 1
    assert client.get(f"{API}/users/{owner['id']}").status_code == 200
    assert client.get(f"{API}/devices/{device['id']}").status_code == 200


def test_delete_user_without_devices(client, make_user):
    user = make_user()
    response = client.delete(f"{API}/users/{user['id']}")
    assert response.status_code == 200
    assert response.json()["deleted"] == {"id": user["id"], "email": user["email"], "name": user["name"]}
    assert client.get(f"{API}/users/{user['id']}").status_code == 404


def test_malformed_and_missing_ids(client):
    assert client.get(f"{API}/users/not-an-id").status_code == 400
    assert client.get(f"{API}/users/{MISSING_ID}").status_code == 404
    assert client.patch(f"{API}/users/{MISSING_ID}", json={"name": "Nobody"}).status_code == 404
    assert client.delete(f"{API}/users/xyz").status_code == 400
