def test_create_and_get_playlist(client, register):
    headers = register("alice")
    response = client.post(
        "/api/playlists",
        json={"name": "Road trip", "videoLimit": 2, "doesOwnerVoteCount": 0},
        headers=headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Playlist created successfully"
    playlist = body["playlist"]
    assert playlist["name"] == "Road trip"
    assert playlist["videoLimit"] == 2
    assert playlist["doesOwnerVoteCount"] == 0

    response = client.get(f"/api/playlists/{playlist['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["playlist"] == playlist


def test_owner_vote_defaults_to_counting(client, register):
    headers = register("alice")
    response = client.post("/api/playlists", json={"name": "x", "videoLimit": 1}, headers=headers)
    assert response.status_code == 201
    assert response.json()["playlist"]["doesOwnerVoteCount"] == 1


def test_create_playlist_validation(client, register):
    headers = register("alice")
    bad_bodies = [
        {"videoLimit": 3, "doesOwnerVoteCount": 1},
        {"name": "", "videoLimit": 3},
        {"name": "x", "doesOwnerVoteCount": 1},
        {"name": "x", "videoLimit": 0},
        {"name": "x", "videoLimit": 3, "doesOwnerVoteCount": 2},
    ]
    for body in bad_bodies:
        response = client.post("/api/playlists", json=body, headers=headers)
        assert response.status_code == 400, body


def test_get_missing_playlist(client, register):
    headers = register("alice")
    assert client.get("/api/playlists/42", headers=headers).status_code == 404


def test_list_all_and_mine(client, register, make_playlist):
    alice = register("alice")
    bob = register("bob")
    first = make_playlist(alice, name="first")
    make_playlist(bob, name="second")

    response = client.get("/api/playlists/all", headers=alice)
    assert [p["name"] for p in response.json()["playlists"]] == ["first", "second"]

    response = client.get("/api/playlists/mine", headers=alice)
    assert [p["id"] for p in response.json()["playlists"]] == [first["id"]]


def test_update_playlist_owner_only(client, register, make_playlist):
    alice = register("alice")
    bob = register("bob")
    playlist = make_playlist(alice)

    response = client.patch(f"/api/playlists/{playlist['id']}", json={"name": "renamed"}, headers=bob)
    assert response.status_code == 403

    response = client.patch(
        f"/api/playlists/{playlist['id']}",
        json={"name": "renamed", "doesOwnerVoteCount": 0},
        headers=alice,
    )
    assert response.status_code == 200
    updated = response.json()["playlist"]
    assert updated["name"] == "renamed"
    assert updated["doesOwnerVoteCount"] == 0
    assert updated["videoLimit"] == playlist["videoLimit"]

    response = client.patch(f"/api/playlists/{playlist['id']}", json={"videoLimit": 0}, headers=alice)
    assert response.status_code == 400
    assert client.patch("/api/playlists/99", json={"name": "y"}, headers=alice).status_code == 404


def test_delete_playlist_cascades(client, register, make_playlist):
    alice = register("alice")
    bob = register("bob")
    playlist = make_playlist(alice)
    client.post(
        f"/api/playlists/{playlist['id']}/contributors", json={"username": "bob"}, headers=alice
    )
    response = client.post(
        f"/api/videos/{playlist['id']}",
        json={"links": ["https://youtu.be/abc"]},
        headers=bob,
    )
    video_id = response.json()["videos"][0]["id"]
    assert client.post(f"/api/scores/{video_id}", json={"score": 9}, headers=alice).status_code == 200

    assert client.delete(f"/api/playlists/{playlist['id']}", headers=bob).status_code == 403

    response = client.delete(f"/api/playlists/{playlist['id']}", headers=alice)
    assert response.status_code == 200

    assert client.get(f"/api/playlists/{playlist['id']}", headers=alice).status_code == 404
    assert client.get(f"/api/videos/{playlist['id']}", headers=alice).status_code == 404
    assert client.get(f"/api/scores/{video_id}", headers=alice).status_code == 404
    assert client.get("/api/playlists/mine", headers=bob).json()["playlists"] == []


def test_contributor_management(client, register, make_playlist):
    alice = register("alice")
    bob = register("bob")
    register("carol")
    playlist = make_playlist(alice)
    url = f"/api/playlists/{playlist['id']}/contributors"

    response = client.post(url, json={"username": "bob"}, headers=alice)
    assert response.status_code == 201
    bob_id = response.json()["contributor"]["id"]

    assert client.post(url, json={"username": "bob"}, headers=alice).status_code == 400
    assert client.post(url, json={"username": "alice"}, headers=alice).status_code == 400
    assert client.post(url, json={"username": "nobody"}, headers=alice).status_code == 404
    assert client.post(url, json={"username": "carol"}, headers=bob).status_code == 403

    response = client.get(url, headers=bob)
    assert response.json()["contributors"] == [{"id": bob_id, "username": "bob"}]

    assert client.delete(f"{url}/{bob_id}", headers=bob).status_code == 403
    assert client.delete(f"{url}/{bob_id}", headers=alice).status_code == 200
    assert client.delete(f"{url}/{bob_id}", headers=alice).status_code == 404
    assert client.get(url, headers=alice).json()["contributors"] == []


def test_mine_includes_playlists_shared_with_contributor(client, register, make_playlist):
    alice = register("alice")
    bob = register("bob")
    shared = make_playlist(alice, name="shared")
    make_playlist(alice, name="private")
    own = make_playlist(bob, name="own")

    assert [p["id"] for p in client.get("/api/playlists/mine", headers=bob).json()["playlists"]] == [own["id"]]

    response = client.post(
        f"/api/playlists/{shared['id']}/contributors", json={"username": "bob"}, headers=alice
    )
    assert response.status_code == 201

    playlists = client.get("/api/playlists/mine", headers=bob).json()["playlists"]
    assert [p["name"] for p in playlists] == ["shared", "own"]
