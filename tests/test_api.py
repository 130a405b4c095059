"""HTTP API tests through the FastAPI test client"""

OLD = "line1\nline2\nline3"
NEW = "line1\nline2-modified\nline3"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "bluedevil-backend"}


class TestDiffApi:
    def test_line_diff(self, client):
        response = client.post("/api/diff", json={"old": OLD, "new": NEW, "granularity": "line"})
        assert response.status_code == 200

        body = response.json()
        assert body["granularity"] == "line"
        assert [h["kind"] for h in body["hunks"]] == ["unchanged", "removed", "added", "unchanged"]
        assert body["hunks"][2]["target_text"] == "line2-modified\n"

    def test_default_granularity_from_config(self, client):
        response = client.put("/api/config", json={"diff": {"default_granularity": "word"}})
        assert response.status_code == 200

        body = client.post("/api/diff", json={"old": "a b", "new": "a c"}).json()
        assert body["granularity"] == "word"

    def test_unknown_granularity(self, client):
        response = client.post("/api/diff", json={"old": "a", "new": "b", "granularity": "paragraph"})
        assert response.status_code == 422

    def test_unified(self, client):
        response = client.post("/api/diff/unified", json={"old": OLD, "new": NEW, "from_label": "v1", "to_label": "v2"})
        assert response.status_code == 200
        assert response.json()["unified_diff"].startswith("--- v1\n+++ v2\n")

    def test_similarity(self, client):
        response = client.post("/api/diff/similarity", json={"old": "quick brown fox", "new": "quick brown fox"})
        assert response.json() == {"score": 1.0}

    def test_semantic(self, client):
        response = client.post("/api/diff/semantic", json={"old": "alpha beta gamma", "new": "alpha beta gamma"})
        body = response.json()
        assert body["lines"][0]["kind"] == "semantic-match"
        assert body["similarity"] == 1.0


class TestMergeApi:
    def test_merge_with_default_choice(self, client):
        response = client.post(
            "/api/merge",
            json={"old": OLD, "new": NEW, "granularity": "line", "default_choice": "useTarget"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["content"] == NEW
        assert body["diff"]["hunks"][1]["resolution"] == "useTarget"

    def test_merge_with_custom_hunk(self, client):
        response = client.post(
            "/api/merge",
            json={
                "old": OLD,
                "new": NEW,
                "granularity": "line",
                "default_choice": "useSource",
                "resolutions": {"hunk-1": {"choice": "custom", "custom_text": "line2-custom\n"}},
            },
        )
        assert response.json()["content"] == "line1\nline2-custom\nline3"

    def test_merge_unresolved_conflict(self, client):
        response = client.post(
            "/api/merge",
            json={
                "old": OLD,
                "new": NEW,
                "granularity": "line",
                "resolutions": {"hunk-1": {"choice": "useSource"}},
            },
        )
        assert response.status_code == 409
        assert response.json()["detail"]["unresolved"] == ["hunk-2"]


class TestVersionsApi:
    def create(self, client, document_id, content):
        response = client.post(f"/api/documents/{document_id}/versions", json={"content": content, "created_by": "alice"})
        assert response.status_code == 201
        return response.json()

    def test_create_and_list(self, client):
        v1 = self.create(client, "doc", OLD)
        v2 = self.create(client, "doc", NEW)

        assert (v1["sequence_number"], v2["sequence_number"]) == (1, 2)
        listed = client.get("/api/documents/doc/versions").json()
        assert [v["id"] for v in listed] == [v1["id"], v2["id"]]
        assert client.get(f"/api/versions/{v2['id']}").json()["content"] == NEW

    def test_unknown_version(self, client):
        assert client.get("/api/versions/missing").status_code == 404

    def test_diff_versions(self, client):
        v1 = self.create(client, "doc", OLD)
        v2 = self.create(client, "doc", NEW)
        other = self.create(client, "other", NEW)

        response = client.get("/api/documents/doc/diff", params={"old_version": v1["id"], "new_version": v2["id"]})
        assert response.status_code == 200
        assert response.json()["stats"]["added"] == 1

        response = client.get("/api/documents/doc/diff", params={"old_version": v1["id"], "new_version": other["id"]})
        assert response.status_code == 400

    def test_merge_session_flow(self, client):
        v1 = self.create(client, "doc", OLD)
        v2 = self.create(client, "doc", NEW)

        response = client.post(
            "/api/merge/sessions", json={"source_version_id": v1["id"], "target_version_id": v2["id"]}
        )
        assert response.status_code == 201
        session = response.json()
        session_id = session["session_id"]
        assert session["unresolved"] == ["hunk-1", "hunk-2"]
        assert session["fully_resolved"] is False

        response = client.post(f"/api/merge/sessions/{session_id}/finalize", json={"created_by": "carol"})
        assert response.status_code == 409

        for hunk_id in session["unresolved"]:
            response = client.put(f"/api/merge/sessions/{session_id}/hunks/{hunk_id}", json={"choice": "useTarget"})
            assert response.status_code == 200
        assert response.json()["fully_resolved"] is True

        preview = client.get(f"/api/merge/sessions/{session_id}/preview").json()
        assert preview == {"content": NEW, "fully_resolved": True}

        response = client.post(f"/api/merge/sessions/{session_id}/finalize", json={"created_by": "carol"})
        assert response.status_code == 200
        merged = response.json()
        assert merged["sequence_number"] == 3
        assert merged["tags"] == ["merge"]

        assert client.get(f"/api/merge/sessions/{session_id}").status_code == 404

    def test_cancel_session(self, client):
        v1 = self.create(client, "doc", OLD)
        v2 = self.create(client, "doc", NEW)
        session_id = client.post(
            "/api/merge/sessions", json={"source_version_id": v1["id"], "target_version_id": v2["id"]}
        ).json()["session_id"]

        response = client.delete(f"/api/merge/sessions/{session_id}")
        assert response.json() == {"status": "cancelled", "session_id": session_id}
        assert client.delete(f"/api/merge/sessions/{session_id}").status_code == 404

    def test_open_session_unknown_version(self, client):
        response = client.post("/api/merge/sessions", json={"source_version_id": "a", "target_version_id": "b"})
        assert response.status_code == 404


class TestKnowledgeApi:
    def upload(self, client, name="notes.md", data=b"# Title\n", mime="text/markdown", **form):
        return client.post(
            "/api/knowledge/documents",
            files={"file": (name, data, mime)},
            data={"project_id": "p1", **form},
        )

    def test_upload_creates_initial_version(self, client):
        response = self.upload(client, created_by="alice")
        assert response.status_code == 201
        document = response.json()
        assert document["file_type"] == "markdown"

        versions = client.get(f"/api/documents/{document['id']}/versions").json()
        assert [v["change_descriptor"] for v in versions] == ["Initial version"]

        content = client.get(f"/api/knowledge/documents/{document['id']}/content")
        assert content.content == b"# Title\n"

    def test_duplicate_upload(self, client):
        self.upload(client)
        assert self.upload(client, name="copy.md").status_code == 409

    def test_folders(self, client):
        response = client.post("/api/knowledge/folders", json={"project_id": "p1", "name": "docs"})
        assert response.status_code == 201
        folder = response.json()
        assert folder["path"] == "/docs"

        assert client.post("/api/knowledge/folders", json={"project_id": "p1", "name": "docs"}).status_code == 409
        assert client.post("/api/knowledge/folders", json={"project_id": "p1", "name": "  "}).status_code == 400

        response = self.upload(client, folder_id=folder["id"])
        assert response.json()["folder_id"] == folder["id"]

        listed = client.get("/api/knowledge/documents", params={"project_id": "p1", "folder_id": folder["id"]}).json()
        assert len(listed) == 1
        assert [f["name"] for f in client.get("/api/knowledge/folders", params={"project_id": "p1"}).json()] == ["docs"]

    def test_delete_document(self, client):
        document_id = self.upload(client).json()["id"]
        assert client.delete(f"/api/knowledge/documents/{document_id}").status_code == 200
        assert client.get(f"/api/knowledge/documents/{document_id}").status_code == 404


class TestAvatarApi:
    def test_upload_fetch_delete(self, client, make_image):
        response = client.post(
            "/api/users/u1/avatar", files={"avatar": ("me.png", make_image(size=(800, 800)), "image/png")}
        )
        assert response.status_code == 200
        assert response.json()["storage_type"] == "inline"
        assert response.json()["mime_type"] == "image/webp"

        view = client.get("/api/users/u1/avatar").json()
        assert view["type"] == "base64"
        assert view["src"].startswith("data:image/webp;base64,")

        assert client.delete("/api/users/u1/avatar").json() == {"success": True, "deleted": True}
        assert client.get("/api/users/u1/avatar").json()["type"] == "fallback"

    def test_invalid_type(self, client):
        response = client.post("/api/users/u1/avatar", files={"avatar": ("me.txt", b"hello", "text/plain")})
        assert response.status_code == 400

    def test_too_large(self, client, make_image):
        client.put("/api/config", json={"avatar": {"max_file_size": 10}})
        from services.registry import reset_registry

        reset_registry()
        response = client.post("/api/users/u1/avatar", files={"avatar": ("me.png", make_image(), "image/png")})
        assert response.status_code == 413

    def test_external_file_served(self, client, make_image):
        client.put("/api/config", json={"avatar": {"max_inline_size": 10}})
        from services.registry import reset_registry

        reset_registry()
        record = client.post("/api/users/u1/avatar", files={"avatar": ("me.png", make_image(), "image/png")}).json()
        assert record["storage_type"] == "external"
        assert record["url"].startswith("/api/avatars/files/")

        response = client.get(record["url"])
        assert response.status_code == 200
        assert client.get("/api/avatars/stats").json()["external_files"] == 1
        assert client.get("/api/avatars/files/missing.webp").status_code == 404


class TestConfigApi:
    def test_get_config(self, client):
        body = client.get("/api/config").json()
        assert body["versions"] == {"backend": "memory"}

    def test_invalid_values(self, client):
        assert client.put("/api/config", json={"diff": {"default_granularity": "page"}}).status_code == 400
        assert client.put("/api/config", json={"versions": {"backend": "redis"}}).status_code == 400


class TestConfiguredGranularity:
    def create(self, client, content):
        return client.post("/api/documents/doc/versions", json={"content": content}).json()

    def test_sessions_and_version_diffs_use_default(self, client):
        client.put("/api/config", json={"diff": {"default_granularity": "word"}})
        v1 = self.create(client, "the quick fox")
        v2 = self.create(client, "the quick brown fox")

        session = client.post(
            "/api/merge/sessions", json={"source_version_id": v1["id"], "target_version_id": v2["id"]}
        ).json()
        assert session["diff"]["granularity"] == "word"

        response = client.get("/api/documents/doc/diff", params={"old_version": v1["id"], "new_version": v2["id"]})
        assert response.json()["granularity"] == "word"

        response = client.get(
            "/api/documents/doc/diff",
            params={"old_version": v1["id"], "new_version": v2["id"], "granularity": "character"},
        )
        assert response.json()["granularity"] == "character"

    def test_unknown_configured_granularity_falls_back_to_line(self, client):
        from services.config_manager import ConfigManager

        ConfigManager.get_instance().save_config({"diff": {"default_granularity": "paragraph"}})

        response = client.post("/api/diff", json={"old": "a", "new": "b"})
        assert response.status_code == 200
        assert response.json()["granularity"] == "line"

    def test_resolve_unknown_hunk(self, client):
        v1 = self.create(client, "a\nb")
        v2 = self.create(client, "a\nc")
        session_id = client.post(
            "/api/merge/sessions", json={"source_version_id": v1["id"], "target_version_id": v2["id"]}
        ).json()["session_id"]

        response = client.put(f"/api/merge/sessions/{session_id}/hunks/hunk-99", json={"choice": "useTarget"})
        assert response.status_code == 404
