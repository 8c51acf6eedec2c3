from ranker.services.scores import rank_videos


PLAYLIST = {"id": 1, "user_id": 1, "does_owner_vote_count": 1}
VIDEOS = [
    {"id": 10, "link": "https://www.youtube.com/embed/a", "user_id": 2},
    {"id": 11, "link": "https://www.youtube.com/embed/b", "user_id": 3},
    {"id": 12, "link": "https://www.youtube.com/embed/c", "user_id": 3},
]


def _score(video_id, user_id, value):
    return {"video_id": video_id, "user_id": user_id, "username": f"u{user_id}", "score": value, "comment": None}


def test_rank_videos_orders_by_average():
    scores = [
        _score(10, 1, 4), _score(10, 2, 6),
        _score(11, 1, 11), _score(11, 2, 8),
    ]
    rankings = rank_videos(PLAYLIST, VIDEOS, scores)
    assert [r["video_id"] for r in rankings] == [11, 10, 12]
    assert rankings[0]["average"] == 9.5
    assert rankings[0]["count"] == 2
    assert rankings[2]["average"] is None
    assert rankings[2]["count"] == 0


def test_rank_videos_excludes_owner_when_flag_off():
    playlist = dict(PLAYLIST, does_owner_vote_count=0)
    scores = [_score(10, 1, 11), _score(10, 2, 3), _score(11, 1, 1)]
    rankings = rank_videos(playlist, VIDEOS, scores)

    by_id = {r["video_id"]: r for r in rankings}
    assert by_id[10]["average"] == 3
    assert by_id[10]["count"] == 1
    assert [s["counted"] for s in by_id[10]["scores"]] == [False, True]
    # Only the owner scored video 11, so it counts as unscored
    assert by_id[11]["average"] is None
    assert [r["video_id"] for r in rankings] == [10, 11, 12]


def test_rank_videos_rounds_and_breaks_ties_by_id():
    scores = [_score(10, 2, 7), _score(11, 2, 7), _score(12, 2, 1), _score(12, 4, 1), _score(12, 5, 2)]
    rankings = rank_videos(PLAYLIST, VIDEOS, scores)
    assert [r["video_id"] for r in rankings] == [10, 11, 12]
    assert rankings[2]["average"] == 1.33


def _setup(client, register, make_playlist, does_owner_vote_count=1):
    owner = register("owner")
    voter = register("voter")
    playlist = make_playlist(owner, does_owner_vote_count=does_owner_vote_count)
    response = client.post(
        f"/api/videos/{playlist['id']}",
        json={"links": ["https://youtu.be/one", "https://youtu.be/two"]},
        headers=owner,
    )
    video_ids = [v["id"] for v in response.json()["videos"]]
    return owner, voter, playlist, video_ids


def test_submit_and_replace_score(client, register, make_playlist):
    owner, voter, playlist, (video_id, _) = _setup(client, register, make_playlist)

    response = client.post(f"/api/scores/{video_id}", json={"score": 7, "comment": "nice"}, headers=voter)
    assert response.status_code == 200
    first = response.json()["score"]
    assert first["score"] == 7
    assert first["comment"] == "nice"
    assert first["videoId"] == video_id

    response = client.post(f"/api/scores/{video_id}", json={"score": 10}, headers=voter)
    assert response.status_code == 200
    second = response.json()["score"]
    assert second["id"] == first["id"]
    assert second["comment"] is None

    response = client.get(f"/api/scores/{video_id}", headers=voter)
    assert response.json()["score"]["score"] == 10

    rankings = client.get(f"/api/scores/all/{playlist['id']}", headers=voter).json()["rankings"]
    assert rankings[0]["videoId"] == video_id
    assert rankings[0]["count"] == 1


def test_score_validation(client, register, make_playlist):
    owner, voter, playlist, (video_id, _) = _setup(client, register, make_playlist)
    for body in ({}, {"score": 0}, {"score": 12}, {"score": -3}):
        response = client.post(f"/api/scores/{video_id}", json=body, headers=voter)
        assert response.status_code == 400, body

    assert client.post("/api/scores/999", json={"score": 5}, headers=voter).status_code == 404


def test_get_and_delete_own_score(client, register, make_playlist):
    owner, voter, playlist, (video_id, _) = _setup(client, register, make_playlist)
    assert client.get(f"/api/scores/{video_id}", headers=voter).status_code == 404
    assert client.delete(f"/api/scores/{video_id}", headers=voter).status_code == 404

    client.post(f"/api/scores/{video_id}", json={"score": 3}, headers=voter)
    assert client.delete(f"/api/scores/{video_id}", headers=voter).status_code == 200
    assert client.get(f"/api/scores/{video_id}", headers=voter).status_code == 404


def test_my_scores(client, register, make_playlist):
    owner, voter, playlist, (first, second) = _setup(client, register, make_playlist)
    client.post(f"/api/scores/{first}", json={"score": 2}, headers=voter)
    client.post(f"/api/scores/{second}", json={"score": 9}, headers=voter)
    client.post(f"/api/scores/{second}", json={"score": 1}, headers=owner)

    scores = client.get(f"/api/scores/my-scores/{playlist['id']}", headers=voter).json()["scores"]
    assert [(s["videoId"], s["score"]) for s in scores] == [(first, 2), (second, 9)]
    assert client.get("/api/scores/my-scores/77", headers=voter).status_code == 404


def test_rankings_exclude_owner_vote(client, register, make_playlist):
    owner, voter, playlist, (first, second) = _setup(
        client, register, make_playlist, does_owner_vote_count=0
    )
    client.post(f"/api/scores/{first}", json={"score": 11}, headers=owner)
    client.post(f"/api/scores/{first}", json={"score": 4}, headers=voter)
    client.post(f"/api/scores/{second}", json={"score": 6}, headers=voter)

    response = client.get(f"/api/scores/all/{playlist['id']}", headers=voter)
    assert response.status_code == 200
    body = response.json()
    assert body["playlist"]["id"] == playlist["id"]
    rankings = body["rankings"]
    assert [r["videoId"] for r in rankings] == [second, first]
    assert rankings[1]["average"] == 4
    owner_entry = [s for s in rankings[1]["scores"] if s["username"] == "owner"][0]
    assert owner_entry["counted"] is False


def test_rankings_include_owner_vote(client, register, make_playlist):
    owner, voter, playlist, (first, second) = _setup(client, register, make_playlist)
    client.post(f"/api/scores/{first}", json={"score": 11}, headers=owner)
    client.post(f"/api/scores/{first}", json={"score": 4}, headers=voter)
    client.post(f"/api/scores/{second}", json={"score": 6}, headers=voter)

    rankings = client.get(f"/api/scores/all/{playlist['id']}", headers=voter).json()["rankings"]
    assert [r["videoId"] for r in rankings] == [first, second]
    assert rankings[0]["average"] == 7.5
    assert rankings[0]["count"] == 2


def test_rankings_missing_playlist(client, register):
    headers = register("alice")
    assert client.get("/api/scores/all/3", headers=headers).status_code == 404
