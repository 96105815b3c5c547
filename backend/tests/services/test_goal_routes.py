"""Goal Routes — HTTP behaviour of the goal lifecycle.

Invariants:
    - Reaching the amount moves a goal from /incomplete to /complete
    - Achieved goals: progress, update and delete → 403 GOAL_ACHIEVED
    - Unknown goal → 404; non-owner / non-member → 403; bad payload → 400
    - Missing acting-user header → 400
"""

from uuid import uuid4

import pytest

DEADLINE = "2027-01-01T00:00:00Z"


def _goal(**overrides):
    body = {"name": "Run", "unit": "km", "amount": 100, "deadline": DEADLINE}
    body.update(overrides)
    return body


@pytest.fixture
async def runners(client, create_user):
    """alice creates Runners, bob joins, carol stays outside."""
    alice = await create_user("alice")
    bob = await create_user("bob")
    carol = await create_user("carol")
    res = await client.post(
        "/api/v1/communities", json={"name": "Runners"},
        headers={"X-User-Id": alice},
    )
    community_id = res.json()["community"]["id"]
    res = await client.put(
        f"/api/v1/communities/join/{community_id}", headers={"X-User-Id": bob},
    )
    assert res.status_code == 200
    return {"alice": alice, "bob": bob, "carol": carol, "community_id": community_id}


async def test_user_goal_lifecycle(client, create_user):
    """Progress 60 then 40 on a 100 km goal achieves it."""
    alice = await create_user("alice")
    headers = {"X-User-Id": alice}

    res = await client.post("/api/v1/goals/user", json=_goal(), headers=headers)
    assert res.status_code == 201
    goal = res.json()["goal"]
    assert goal["status"] == "open"
    assert goal["owner_kind"] == "user"

    res = await client.patch(
        f"/api/v1/goals/user/progress/{goal['id']}",
        json={"progress": 60}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["goal"]["progress"] == 60
    assert res.json()["goal"]["status"] == "open"

    res = await client.patch(
        f"/api/v1/goals/user/progress/{goal['id']}",
        json={"progress": 40}, headers=headers,
    )
    assert res.json()["goal"]["status"] == "achieved"

    incomplete = await client.get(f"/api/v1/goals/incomplete/user/{alice}")
    complete = await client.get(f"/api/v1/goals/complete/user/{alice}")
    assert incomplete.json() == []
    assert [g["id"] for g in complete.json()] == [goal["id"]]


async def test_achieved_goal_is_terminal(client, create_user):
    alice = await create_user("alice")
    headers = {"X-User-Id": alice}
    res = await client.post("/api/v1/goals/user", json=_goal(amount=5), headers=headers)
    goal_id = res.json()["goal"]["id"]
    await client.patch(
        f"/api/v1/goals/user/progress/{goal_id}", json={"progress": 5}, headers=headers,
    )

    progress = await client.patch(
        f"/api/v1/goals/user/progress/{goal_id}", json={"progress": 1}, headers=headers,
    )
    update = await client.patch(
        f"/api/v1/goals/user/{goal_id}", json={"name": "Walk"}, headers=headers,
    )
    delete = await client.delete(f"/api/v1/goals/user/{goal_id}", headers=headers)

    for res in (progress, update, delete):
        assert res.status_code == 403
        assert res.json()["error"]["code"] == "GOAL_ACHIEVED"


async def test_only_owner_manages_user_goal(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    res = await client.post(
        "/api/v1/goals/user", json=_goal(), headers={"X-User-Id": alice},
    )
    goal_id = res.json()["goal"]["id"]

    res = await client.patch(
        f"/api/v1/goals/user/progress/{goal_id}",
        json={"progress": 10}, headers={"X-User-Id": bob},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_GOAL_OWNER"


async def test_update_and_delete_open_goal(client, create_user):
    alice = await create_user("alice")
    headers = {"X-User-Id": alice}
    res = await client.post("/api/v1/goals/user", json=_goal(), headers=headers)
    goal_id = res.json()["goal"]["id"]

    res = await client.patch(
        f"/api/v1/goals/user/{goal_id}", json={"name": "Long run"}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["goal"]["name"] == "Long run"

    res = await client.delete(f"/api/v1/goals/user/{goal_id}", headers=headers)
    assert res.status_code == 200
    assert (await client.get(f"/api/v1/goals/{goal_id}")).status_code == 404


async def test_lowering_amount_achieves_goal(client, create_user):
    alice = await create_user("alice")
    headers = {"X-User-Id": alice}
    res = await client.post("/api/v1/goals/user", json=_goal(), headers=headers)
    goal_id = res.json()["goal"]["id"]
    await client.patch(
        f"/api/v1/goals/user/progress/{goal_id}", json={"progress": 30}, headers=headers,
    )

    res = await client.patch(
        f"/api/v1/goals/user/{goal_id}", json={"amount": 25}, headers=headers,
    )
    assert res.json()["goal"]["status"] == "achieved"


async def test_community_goal_managed_by_members(client, runners):
    bob = {"X-User-Id": runners["bob"]}
    carol = {"X-User-Id": runners["carol"]}
    res = await client.post(
        "/api/v1/goals/community",
        json=_goal(community_id=runners["community_id"]), headers=bob,
    )
    assert res.status_code == 201
    goal_id = res.json()["goal"]["id"]

    res = await client.patch(
        f"/api/v1/goals/community/progress/{goal_id}",
        json={"progress": 100}, headers={"X-User-Id": runners["alice"]},
    )
    assert res.json()["goal"]["status"] == "achieved"

    res = await client.patch(
        f"/api/v1/goals/community/progress/{goal_id}",
        json={"progress": 1}, headers=carol,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_A_MEMBER"

    complete = await client.get(
        f"/api/v1/goals/complete/community/{runners['community_id']}",
    )
    assert [g["id"] for g in complete.json()] == [goal_id]


async def test_non_member_cannot_create_community_goal(client, runners):
    res = await client.post(
        "/api/v1/goals/community",
        json=_goal(community_id=runners["community_id"]),
        headers={"X-User-Id": runners["carol"]},
    )
    assert res.status_code == 403
    assert (await client.get("/api/v1/goals/incomplete")).json() == []


async def test_goal_kind_must_match_route(client, create_user):
    alice = await create_user("alice")
    headers = {"X-User-Id": alice}
    res = await client.post("/api/v1/goals/user", json=_goal(), headers=headers)
    goal_id = res.json()["goal"]["id"]

    res = await client.patch(
        f"/api/v1/goals/community/progress/{goal_id}",
        json={"progress": 1}, headers=headers,
    )
    assert res.status_code == 404


async def test_unknown_goal_returns_404(client, create_user):
    alice = await create_user("alice")
    res = await client.patch(
        f"/api/v1/goals/user/progress/{uuid4()}",
        json={"progress": 1}, headers={"X-User-Id": alice},
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "GOAL_NOT_FOUND"


@pytest.mark.parametrize("progress", [0, -10])
async def test_non_positive_progress_returns_400(client, create_user, progress):
    alice = await create_user("alice")
    headers = {"X-User-Id": alice}
    res = await client.post("/api/v1/goals/user", json=_goal(), headers=headers)
    goal_id = res.json()["goal"]["id"]

    res = await client.patch(
        f"/api/v1/goals/user/progress/{goal_id}",
        json={"progress": progress}, headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert (await client.get(f"/api/v1/goals/{goal_id}")).json()["progress"] == 0


async def test_missing_user_header_returns_400(client):
    res = await client.post("/api/v1/goals/user", json=_goal())
    assert res.status_code == 400


async def test_unknown_acting_user_returns_404(client):
    res = await client.post(
        "/api/v1/goals/user", json=_goal(), headers={"X-User-Id": str(uuid4())},
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"
