"""Vote toggle and the one-vote-per-user-per-idea guard."""

import pytest
from sqlalchemy.exc import IntegrityError

from ideaboard.models.vote import Vote
from ideaboard.services import voting


@pytest.fixture()
def idea_id(alice_client, submit_idea):
    return submit_idea(alice_client)["id"]


def test_toggle_adds_then_removes(bob_client, idea_id, count_rows):
    added = bob_client.post("/vote", json={"ideaId": idea_id})
    assert added.status_code == 201
    assert added.json() == {
        "message": "Vote added",
        "action": "added",
        "voted": True,
        "ideaId": idea_id,
        "voteCount": 1,
    }

    removed = bob_client.post("/vote", json={"ideaId": idea_id})
    assert removed.status_code == 200
    assert removed.json()["action"] == "removed"
    assert removed.json()["voted"] is False
    assert removed.json()["voteCount"] == 0
    assert count_rows(Vote) == 0


def test_counts_follow_each_toggle(alice_client, bob_client, anon_client, idea_id):
    def listed_count():
        return anon_client.get(f"/ideas/{idea_id}").json()["voteCount"]

    assert listed_count() == 0
    bob_client.post("/vote", json={"ideaId": idea_id})
    assert listed_count() == 1
    alice_client.post("/vote", json={"ideaId": idea_id})
    assert listed_count() == 2
    bob_client.post("/vote", json={"ideaId": idea_id})
    assert listed_count() == 1


def test_author_may_vote_on_own_idea(alice_client, idea_id):
    response = alice_client.post("/vote", json={"ideaId": idea_id})
    assert response.status_code == 201


def test_voted_ideas_listing(bob_client, alice_client, submit_idea, idea_id):
    other = submit_idea(alice_client, title="Keyboard shortcuts")["id"]
    bob_client.post("/vote", json={"ideaId": other})
    bob_client.post("/vote", json={"ideaId": idea_id})

    assert bob_client.get("/vote").json() == {"ideaIds": sorted([idea_id, other])}
    assert alice_client.get("/vote").json() == {"ideaIds": []}


def test_vote_requires_session(anon_client, idea_id):
    assert anon_client.post("/vote", json={"ideaId": idea_id}).status_code == 401
    assert anon_client.get("/vote").status_code == 401


def test_vote_requires_idea_id(bob_client):
    response = bob_client.post("/vote", json={})
    assert response.status_code == 400
    assert response.json() == {"message": "Missing ideaId"}


def test_vote_on_missing_idea(bob_client):
    response = bob_client.post("/vote", json={"ideaId": 999})
    assert response.status_code == 404
    assert response.json() == {"message": "Idea not found"}


def test_losing_racer_gets_conflict(bob_client, idea_id, count_rows, monkeypatch):
    """A stale "no vote yet" read must not produce a second vote row."""
    bob_client.post("/vote", json={"ideaId": idea_id})

    async def stale_lookup(db, user_id, idea_id):
        return None

    monkeypatch.setattr(voting, "_find_vote", stale_lookup)
    response = bob_client.post("/vote", json={"ideaId": idea_id})

    assert response.status_code == 409
    assert response.json() == {"message": "Vote already recorded"}
    assert count_rows(Vote) == 1


def test_database_rejects_duplicate_vote(run_db, alice_id, idea_id):
    async def insert_twice(session):
        session.add(Vote(user_id=alice_id, idea_id=idea_id))
        await session.commit()
        session.add(Vote(user_id=alice_id, idea_id=idea_id))
        await session.commit()

    with pytest.raises(IntegrityError):
        run_db(insert_twice)
