"""Tests for the prompt sync HTTP endpoints."""


class TestPromptAPI:
    def test_list_prompts(self, client):
        resp = client.get("/api/v1/prompts")
        assert resp.status_code == 200
        assert resp.json() == {"project_id": "42", "names": ["a", "b"]}

    def test_get_prompt(self, client):
        resp = client.get("/api/v1/prompts/a")
        assert resp.status_code == 200
        assert resp.json()["content"] == "A v1"

    def test_get_nested_path(self, client, fake_client):
        fake_client.documents["agents/helper"] = "H"
        resp = client.get("/api/v1/prompts/agents/helper")
        assert resp.status_code == 200
        assert resp.json()["name"] == "agents/helper"

    def test_get_not_found(self, client):
        resp = client.get("/api/v1/prompts/nonexistent")
        assert resp.status_code == 404

    def test_push(self, client, fake_client):
        resp = client.post("/api/v1/prompts/push", json={
            "prompts": [{"name": "a", "content": "X"}, {"name": "c", "content": "Y"}],
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["deleted"] == ["b"]
        assert data["added"] == ["a", "c"]
        assert data["version"]["uuid"] == fake_client.live_version

    def test_push_empty(self, client):
        resp = client.post("/api/v1/prompts/push", json={"prompts": []})
        assert resp.status_code == 422

    def test_append_noop(self, client):
        resp = client.post("/api/v1/prompts/append", json={
            "prompts": [{"name": "a", "content": "Z"}],
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["deployed"] is False
        assert data["skipped"] == ["a"]
        assert data["version"] is None

    def test_replace(self, client):
        resp = client.post("/api/v1/prompts/replace", json={"name": "b", "content": "B v2"})
        assert resp.status_code == 200
        assert resp.json()["action"] == "replaced"

    def test_pull_default_root(self, client, tmp_path):
        resp = client.post("/api/v1/prompts/pull", json={})
        assert resp.status_code == 200
        assert sorted(resp.json()["written"]) == ["a.promptl", "b.promptl"]
        assert (tmp_path / "prompts" / "a.promptl").read_text() == "A v1"

    def test_pull_relative_subdirectory(self, client, tmp_path):
        resp = client.post("/api/v1/prompts/pull", json={"outputDir": "team"})
        assert resp.status_code == 200
        assert (tmp_path / "prompts" / "team" / "b.promptl").exists()

    def test_pull_outside_root_rejected(self, client, tmp_path, fake_client):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        (elsewhere / "important.promptl").write_text("keep me")

        resp = client.post("/api/v1/prompts/pull", json={"outputDir": str(elsewhere)})

        assert resp.status_code == 422
        assert [p.name for p in elsewhere.iterdir()] == ["important.promptl"]
        assert fake_client.calls == []

    def test_pull_parent_traversal_rejected(self, client, tmp_path):
        (tmp_path / "keep.promptl").write_text("x")
        resp = client.post("/api/v1/prompts/pull", json={"outputDir": ".."})
        assert resp.status_code == 422
        assert (tmp_path / "keep.promptl").exists()

    def test_run(self, client):
        resp = client.post("/api/v1/prompts/run", json={"name": "a"})
        assert resp.status_code == 200
        assert resp.json()["conversation_uuid"] == "conv-1"

    def test_remote_failure_maps_to_502(self, client, fake_client):
        fake_client.fail_on = "deploy_to_live"
        resp = client.post("/api/v1/prompts/replace", json={"name": "b", "content": "x"})
        assert resp.status_code == 502

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
