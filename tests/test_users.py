"""Public profiles and self-service profile edits."""


def test_profile_lists_ideas_with_counts(alice_id, alice_client, bob_client, anon_client, submit_idea):
    idea_id = submit_idea(alice_client)["id"]
    bob_client.post("/vote", json={"ideaId": idea_id})
    bob_client.post("/comments", json={"ideaId": idea_id, "content": "love it"})
    alice_client.post("/vote", json={"ideaId": idea_id})

    profile = anon_client.get(f"/users/{alice_id}").json()
    assert profile["name"] == "Alice"
    assert profile["ideaCount"] == 1
    assert profile["voteCount"] == 1
    assert profile["ideas"][0]["id"] == idea_id
    assert profile["ideas"][0]["voteCount"] == 2
    assert profile["ideas"][0]["commentCount"] == 1


def test_profile_of_missing_user(anon_client):
    response = anon_client.get("/users/999")
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_edit_own_name(alice_id, alice_client):
    response = alice_client.patch(f"/users/{alice_id}", json={"name": "Alice Liddell"})
    assert response.status_code == 200
    assert response.json()["name"] == "Alice Liddell"
    assert response.json()["email"] == "alice@example.com"


def test_cannot_edit_someone_else(alice_client, bob_id, anon_client):
    response = alice_client.patch(f"/users/{bob_id}", json={"name": "Hacked"})
    assert response.status_code == 403
    assert response.json() == {"message": "You can only edit your own profile"}
    assert anon_client.get(f"/users/{bob_id}").json()["name"] == "Bob"


def test_edit_requires_session(anon_client, alice_id):
    assert anon_client.patch(f"/users/{alice_id}", json={"name": "x"}).status_code == 401


def test_email_taken(alice_id, alice_client, bob_id):
    response = alice_client.patch(f"/users/{alice_id}", json={"email": "bob@example.com"})
    assert response.status_code == 409


def test_role_cannot_be_self_assigned(alice_id, alice_client):
    response = alice_client.patch(f"/users/{alice_id}", json={"role": "ADMIN"})
    assert response.status_code == 200
    assert response.json()["role"] == "USER"


def test_password_change_takes_effect(alice_id, alice_client, make_client):
    alice_client.patch(f"/users/{alice_id}", json={"password": "brand-new-pw"})
    make_client("alice@example.com", password="brand-new-pw")

    stale = make_client().post(
        "/auth/login", json={"email": "alice@example.com", "password": "secret-password"}
    )
    assert stale.status_code == 401
