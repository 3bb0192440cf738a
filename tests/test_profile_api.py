import base64

from conftest import auth_headers, signup

PNG = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake image bytes").decode()


def test_get_profile(client, headers):
    resp = client.get("/profile", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "ana@example.com"
    assert body["contact_number"] == "09171234567"


def test_update_profile_partial(client, headers):
    resp = client.patch("/profile", headers=headers, json={"contact_number": " 0999 "})
    assert resp.status_code == 200
    body = resp.json()
    assert body["contact_number"] == "0999"
    assert body["name"] == "Ana Cruz"


def test_update_profile_requires_a_field(client, headers):
    assert client.patch("/profile", headers=headers, json={}).status_code == 422


def test_update_profile_rejects_blank_and_bad_email(client, headers):
    assert client.patch("/profile", headers=headers, json={"name": "   "}).status_code == 422
    assert client.patch("/profile", headers=headers, json={"email": "not-an-email"}).status_code == 422


def test_update_profile_ignores_streak(client, headers):
    resp = client.patch("/profile", headers=headers, json={"name": "Ana", "streak": 99})
    assert resp.status_code == 200
    assert resp.json()["streak"] == 0


def test_profile_missing_for_account_without_record(client, identity):
    # Provider account that never got a profile row
    session = identity.sign_up("orphan@example.com", "secret123", "Orphan")
    headers = {"Authorization": f"Bearer {session.id_token}"}
    resp = client.get("/profile", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "profile not found"


def test_avatar_set_and_clear(client, headers):
    resp = client.put("/profile/avatar", headers=headers, json={"data_url": PNG})
    assert resp.status_code == 200
    assert resp.json()["avatar_url"] == PNG
    resp = client.delete("/profile/avatar", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["avatar_url"] is None


def test_avatar_must_be_image(client, headers):
    text = "data:text/plain;base64," + base64.b64encode(b"hello").decode()
    resp = client.put("/profile/avatar", headers=headers, json={"data_url": text})
    assert resp.status_code == 422
    assert "valid image" in resp.json()["detail"][0]["msg"]


def test_avatar_size_limit(client, settings, headers):
    big = base64.b64encode(b"\0" * (settings.avatar_max_bytes + 1)).decode()
    resp = client.put(
        "/profile/avatar", headers=headers, json={"data_url": "data:image/jpeg;base64," + big}
    )
    assert resp.status_code == 413
    assert resp.json()["detail"] == "Image size should be less than 5MB"


def test_profiles_are_isolated(client, user):
    other = signup(client, email="ben@example.com", name="Ben")
    client.patch("/profile", headers=auth_headers(other), json={"name": "Benjamin"})
    mine = client.get("/profile", headers=auth_headers(user)).json()
    assert mine["name"] == "Ana Cruz"
