"""Submitting, listing and moderating ideas."""

import pytest


def test_submitted_idea_is_pending_until_approved(admin_client, alice_client, submit_idea):
    idea = submit_idea(alice_client)
    assert idea["status"] == "pending"
    assert idea["author"] == {"name": "Alice"}
    assert idea["category"] == {"name": "UX"}
    assert idea["voteCount"] == 0
    assert idea["commentCount"] == 0

    response = admin_client.patch(f"/ideas/{idea['id']}", json={"status": "approved"})
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    listed = alice_client.get("/ideas").json()
    assert [(i["id"], i["status"]) for i in listed] == [(idea["id"], "approved")]


def test_non_admin_cannot_change_status(alice_client, bob_client, submit_idea):
    idea = submit_idea(alice_client)

    for client in (alice_client, bob_client):
        response = client.patch(f"/ideas/{idea['id']}", json={"status": "approved"})
        assert response.status_code == 403
        assert response.json() == {"message": "Admin privileges required"}

    assert alice_client.get(f"/ideas/{idea['id']}").json()["status"] == "pending"


def test_anonymous_cannot_change_status(anon_client, alice_client, submit_idea):
    idea = submit_idea(alice_client)
    response = anon_client.patch(f"/ideas/{idea['id']}", json={"status": "rejected"})
    assert response.status_code == 401


def test_status_can_move_back_and_be_reapplied(admin_client, alice_client, submit_idea):
    idea = submit_idea(alice_client)
    url = f"/ideas/{idea['id']}"
    for status in ("rejected", "rejected", "pending", "approved"):
        response = admin_client.patch(url, json={"status": status})
        assert response.status_code == 200
        assert response.json()["status"] == status


def test_invalid_status_rejected(admin_client, alice_client, submit_idea):
    idea = submit_idea(alice_client)
    response = admin_client.patch(f"/ideas/{idea['id']}", json={"status": "archived"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid status")


def test_status_change_on_missing_idea(admin_client):
    response = admin_client.patch("/ideas/999", json={"status": "approved"})
    assert response.status_code == 404
    assert response.json() == {"message": "Idea not found"}


def test_submit_requires_session(anon_client, category_id):
    response = anon_client.post(
        "/ideas", json={"title": "t", "description": "d", "categoryId": category_id}
    )
    assert response.status_code == 401


def test_submit_requires_category(alice_client):
    response = alice_client.post("/ideas", json={"title": "t", "description": "d"})
    assert response.status_code == 400
    assert response.json() == {"message": "Missing categoryId"}


def test_submit_unknown_category(alice_client):
    response = alice_client.post(
        "/ideas", json={"title": "t", "description": "d", "categoryId": 404}
    )
    assert response.status_code == 404
    assert response.json() == {"message": "Category not found"}


def test_detail_includes_comments(alice_client, bob_client, submit_idea):
    idea = submit_idea(alice_client)
    bob_client.post(f"/ideas/{idea['id']}/comments", json={"content": "Yes please"})

    detail = alice_client.get(f"/ideas/{idea['id']}").json()
    assert detail["commentCount"] == 1
    assert [c["content"] for c in detail["comments"]] == ["Yes please"]
    assert detail["comments"][0]["user"] == {"name": "Bob"}


def test_detail_missing_idea(anon_client):
    response = anon_client.get("/ideas/12345")
    assert response.status_code == 404


def test_unknown_route_uses_message_shape(anon_client):
    response = anon_client.get("/nowhere")
    assert response.status_code == 404
    assert set(response.json()) == {"message"}


class TestListFilters:
    @pytest.fixture()
    def board(self, admin_client, alice_client, bob_client, submit_idea):
        first = submit_idea(alice_client, title="First")
        second = submit_idea(bob_client, title="Second")
        third = submit_idea(alice_client, title="Third")
        admin_client.patch(f"/ideas/{second['id']}", json={"status": "approved"})
        bob_client.post("/vote", json={"ideaId": first["id"]})
        alice_client.post("/vote", json={"ideaId": first["id"]})
        bob_client.post("/vote", json={"ideaId": third["id"]})
        return {"first": first["id"], "second": second["id"], "third": third["id"]}

    def test_newest_first(self, anon_client, board):
        ids = [i["id"] for i in anon_client.get("/ideas").json()]
        assert ids == [board["third"], board["second"], board["first"]]

    def test_sort_by_votes(self, anon_client, board):
        listed = anon_client.get("/ideas", params={"sort": "mostVotes"}).json()
        assert [i["id"] for i in listed] == [board["first"], board["third"], board["second"]]
        assert [i["voteCount"] for i in listed] == [2, 1, 0]

    def test_invalid_sort(self, anon_client, board):
        response = anon_client.get("/ideas", params={"sort": "random"})
        assert response.status_code == 400

    def test_status_filter(self, anon_client, board):
        listed = anon_client.get("/ideas", params={"status": "approved"}).json()
        assert [i["id"] for i in listed] == [board["second"]]

    def test_category_filter(self, anon_client, board, category_id):
        assert len(anon_client.get("/ideas", params={"categoryId": category_id}).json()) == 3
        assert anon_client.get("/ideas", params={"categoryId": category_id + 1}).json() == []

    def test_mine(self, alice_client, board):
        listed = alice_client.get("/ideas", params={"mine": "true"}).json()
        assert {i["id"] for i in listed} == {board["first"], board["third"]}

    def test_voted(self, bob_client, board):
        listed = bob_client.get("/ideas", params={"voted": "true"}).json()
        assert {i["id"] for i in listed} == {board["first"], board["third"]}

    def test_mine_needs_session(self, anon_client, board):
        response = anon_client.get("/ideas", params={"mine": "true"})
        assert response.status_code == 401


def test_health(anon_client):
    assert anon_client.get("/health").json() == {"status": "healthy"}
