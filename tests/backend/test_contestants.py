class TestContestantsApi:
    def test_create_and_list(self, test_app_client, app_headers, contestant_ids):
        client, _ = test_app_client
        resp = client.get("/api/v1/contestants", headers=app_headers)

        assert resp.status_code == 200
        assert [c["name"] for c in resp.json()] == ["alice", "bob", "carol"]

    def test_detail_without_scores(self, test_app_client, app_headers, contestant_ids):
        client, _ = test_app_client
        resp = client.get(f"/api/v1/contestants/{contestant_ids[0]}", headers=app_headers)

        assert resp.status_code == 200
        assert resp.json()["name"] == "alice"
        assert resp.json()["scores"] == []

    def test_detail_groups_scores_by_board(
        self, test_app_client, admin_headers, app_headers, race_board_id, contestant_ids
    ):
        client, _ = test_app_client
        golf = client.post(
            "/api/v1/boards",
            json={"name": "Golf", "fields": {"strokes": {"sort_order": 0, "sort_descending": False}}},
            headers=admin_headers,
        ).json()
        alice = contestant_ids[0]

        client.post(
            f"/api/v1/boards/{golf['id']}/scores/{alice}",
            json={"values": {"strokes": 72}},
            headers=app_headers,
        )
        client.post(
            f"/api/v1/boards/{race_board_id}/scores/{alice}",
            json={"values": {"points": 10, "time": 61.5}, "context": {"track": "north"}},
            headers=app_headers,
        )

        resp = client.get(f"/api/v1/contestants/{alice}", headers=app_headers)
        scores = resp.json()["scores"]

        assert [s["board"] for s in scores] == ["Race", "Golf"]
        assert scores[0]["values"] == {"points": 10, "time": 61.5}
        assert scores[0]["context"] == {"track": "north"}
        assert scores[1]["values"] == {"strokes": 72}

        only_scores = client.get(f"/api/v1/contestants/{alice}/scores", headers=app_headers)
        assert only_scores.json() == scores

    def test_rename(self, test_app_client, app_headers, contestant_ids):
        client, _ = test_app_client
        resp = client.patch(
            f"/api/v1/contestants/{contestant_ids[1]}",
            json={"name": "robert"},
            headers=app_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "robert"

    def test_delete_removes_entries(
        self, test_app_client, app_headers, race_board_id, contestant_ids
    ):
        client, _ = test_app_client
        bob = contestant_ids[1]
        client.post(
            f"/api/v1/boards/{race_board_id}/scores/{bob}",
            json={"values": {"points": 1, "time": 1}},
            headers=app_headers,
        )

        assert client.delete(f"/api/v1/contestants/{bob}", headers=app_headers).status_code == 204
        assert client.get(f"/api/v1/contestants/{bob}", headers=app_headers).status_code == 404

        board = client.get(f"/api/v1/boards/{race_board_id}", headers=app_headers).json()
        assert board["scores"] == []

    def test_unknown_contestant_is_404(self, test_app_client, app_headers):
        client, _ = test_app_client
        resp = client.get("/api/v1/contestants/999", headers=app_headers)
        assert resp.status_code == 404
        assert resp.json() == {
            "detail": "Could not find contestant with identifier 999",
            "status_code": 404,
        }
