"""User Routes — registration, lookup, rename and delete over HTTP.

Invariants:
    - Usernames are unique on create and rename (403 USERNAME_TAKEN)
    - Rename and delete act on the user named by X-User-Id
"""


async def test_register_and_look_up(client, create_user):
    alice = await create_user("  alice ")

    res = await client.get("/api/v1/users/alice")
    assert res.status_code == 200
    assert res.json()["id"] == alice
    assert [u["username"] for u in (await client.get("/api/v1/users")).json()] == ["alice"]


async def test_duplicate_username_returns_403(client, create_user):
    await create_user("alice")

    res = await client.post("/api/v1/users", json={"username": "alice"})
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USERNAME_TAKEN"


async def test_rename(client, create_user):
    alice = await create_user("alice")
    await create_user("bob")

    res = await client.patch(
        "/api/v1/users/username", json={"username": "alicia"}, headers={"X-User-Id": alice},
    )
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "alicia"
    assert (await client.get("/api/v1/users/alice")).status_code == 404

    res = await client.patch(
        "/api/v1/users/username", json={"username": "bob"}, headers={"X-User-Id": alice},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "USERNAME_TAKEN"


async def test_blank_rename_returns_400(client, create_user):
    alice = await create_user("alice")

    res = await client.patch(
        "/api/v1/users/username", json={"username": "  "}, headers={"X-User-Id": alice},
    )
    assert res.status_code == 400


async def test_delete_acting_user(client, create_user):
    alice = await create_user("alice")

    res = await client.delete("/api/v1/users", headers={"X-User-Id": alice})
    assert res.status_code == 200
    assert (await client.get("/api/v1/users/alice")).status_code == 404

    res = await client.delete("/api/v1/users", headers={"X-User-Id": alice})
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"
