import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import cats_social.main as m


@pytest.fixture
def client(monkeypatch, session_factory):
    monkeypatch.setattr(m, "wait_for_db", lambda *args, **kwargs: None)
    monkeypatch.setattr(m, "init_db", lambda *args, **kwargs: None)
    return TestClient(m.app)


def _register(client, email: str, name: str) -> dict[str, str]:
    res = client.post("/v1/user/register", json={"email": email, "name": name, "password": "secret1"})
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['data']['accessToken']}"}


def _cat(client, headers, name: str, sex: str) -> str:
    res = client.post(
        "/v1/cat",
        headers=headers,
        json={
            "name": name,
            "race": "Siamese",
            "sex": sex,
            "ageInMonth": 24,
            "description": f"{name} likes naps",
            "imageUrls": ["https://img.example.com/a.png"],
        },
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]["id"]


def test_match_lifecycle_end_to_end(client):
    u1 = _register(client, "one@example.com", "Owner One")
    u2 = _register(client, "two@example.com", "Owner Two")
    cat_a = _cat(client, u1, "Tom", "male")
    cat_b = _cat(client, u2, "Kitty", "female")

    created = client.post("/v1/cat/match", headers=u1, json={"matchCatId": cat_b, "userCatId": cat_a, "message": "wanna meet?"})
    assert created.status_code == 201
    assert created.json() == {"message": "successfully send match request"}

    listed = client.get("/v1/cat/match", headers=u2)
    assert listed.status_code == 200
    data = listed.json()["data"]
    assert len(data) == 1
    match = data[0]
    assert match["status"] == "waiting"
    assert match["issuedBy"] == {"name": "Owner One", "email": "one@example.com"}
    assert match["matchCat"]["id"] == cat_b
    assert match["userCat"]["ageInMonth"] == 24
    assert match["userCat"]["imageUrls"] == ["https://img.example.com/a.png"]

    # only the issuer may withdraw; anyone else sees 404
    assert client.delete(f"/v1/cat/match/{match['id']}", headers=u2).status_code == 404

    accepted = client.put(f"/v1/cat/match/{match['id']}", headers=u2, json={"status": "accepted"})
    assert accepted.status_code == 200
    assert accepted.json()["data"]["status"] == "accepted"
    assert accepted.json()["data"]["matchCat"]["hasMatched"] is True

    again = client.post("/v1/cat/match", headers=u1, json={"matchCatId": cat_b, "userCatId": cat_a, "message": "once more"})
    assert again.status_code == 400
    assert "already matched" in again.json()["message"]

    removed = client.delete(f"/v1/cat/match/{match['id']}", headers=u1)
    assert removed.status_code == 400


def test_issuer_can_delete_waiting_match(client):
    u1 = _register(client, "one@example.com", "Owner One")
    u2 = _register(client, "two@example.com", "Owner Two")
    cat_a = _cat(client, u1, "Tom", "male")
    cat_b = _cat(client, u2, "Kitty", "female")
    client.post("/v1/cat/match", headers=u1, json={"matchCatId": cat_b, "userCatId": cat_a, "message": "wanna meet?"})
    match_id = client.get("/v1/cat/match", headers=u1).json()["data"][0]["id"]

    res = client.delete(f"/v1/cat/match/{match_id}", headers=u1)
    assert res.status_code == 200
    assert client.get("/v1/cat/match", headers=u1).json()["data"] == []
    assert client.delete(f"/v1/cat/match/{match_id}", headers=u1).status_code == 404


def test_create_match_rule_violations(client):
    u1 = _register(client, "one@example.com", "Owner One")
    u2 = _register(client, "two@example.com", "Owner Two")
    tom = _cat(client, u1, "Tom", "male")
    leo = _cat(client, u2, "Leo", "male")
    mimi = _cat(client, u1, "Mimi", "female")

    same_sex = client.post("/v1/cat/match", headers=u1, json={"matchCatId": leo, "userCatId": tom, "message": "hi there"})
    assert same_sex.status_code == 400
    own_cat = client.post("/v1/cat/match", headers=u1, json={"matchCatId": mimi, "userCatId": tom, "message": "hi there"})
    assert own_cat.status_code == 400
    short = client.post("/v1/cat/match", headers=u1, json={"matchCatId": mimi, "userCatId": tom, "message": "hi"})
    assert short.status_code == 400
    assert client.get("/v1/cat/match", headers=u1).json()["data"] == []


def test_match_routes_require_bearer_token(client):
    assert client.get("/v1/cat/match").status_code == 401
    assert client.get("/v1/cat/match", headers={"Authorization": "Token abc"}).status_code == 401
    res = client.get("/v1/cat/match", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert "message" in res.json()


def test_cat_crud_over_http(client):
    u1 = _register(client, "one@example.com", "Owner One")
    cat_id = _cat(client, u1, "Tom", "male")

    bad = client.post("/v1/cat", headers=u1, json={"name": "X", "race": "Tiger", "sex": "male", "ageInMonth": 1, "description": "d", "imageUrls": ["https://a.b/c"]})
    assert bad.status_code == 400

    listed = client.get("/v1/cat", params={"owned": "true", "race": "Siamese"}, headers=u1)
    assert [c["id"] for c in listed.json()["data"]] == [cat_id]

    updated = client.put(
        f"/v1/cat/{cat_id}",
        headers=u1,
        json={"name": "Tommy", "race": "Bengal", "sex": "male", "ageInMonth": 25, "description": "older", "imageUrls": ["https://img.example.com/b.png"]},
    )
    assert updated.status_code == 200
    assert client.get("/v1/cat", params={"id": cat_id}, headers=u1).json()["data"][0]["race"] == "Bengal"

    assert client.delete(f"/v1/cat/{cat_id}", headers=u1).status_code == 200
    assert client.get("/v1/cat", params={"id": cat_id}, headers=u1).json()["data"] == []


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
