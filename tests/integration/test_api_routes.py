"""Testes de integração das rotas HTTP (TestClient + store em memória)."""

from __future__ import annotations

import inspect
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from webzine_guard.api.app import create_app
from webzine_guard.api.routes import router
from webzine_guard.config.settings import get_settings
from webzine_guard.domain.errors import CredentialHashingError

VALID_COMMENT = {"user_name": "홍길동", "password": "1234", "body": "정말 좋은 시네요 감사합니다"}


def _create_comment(client, content_id: str = "post-1", **overrides) -> dict:
    response = client.post(
        f"/api/contents/{content_id}/comments", json={**VALID_COMMENT, **overrides}
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestLikeEndpoint:
    def test_first_like_is_accepted(self, client):
        response = client.post("/api/contents/post-1/like")

        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is True
        assert payload["accepted"] is True
        assert payload["likes_count"] == 6
        assert payload["content_id"] == "post-1"

    def test_repeat_like_is_rate_limited_with_current_count(self, client):
        client.post("/api/contents/post-1/like")
        response = client.post("/api/contents/post-1/like")

        assert response.status_code == 429
        payload = response.json()
        assert payload["accepted"] is False
        assert payload["error"] == "rate_limited"
        assert payload["likes_count"] == 6

    def test_like_after_window(self, client, clock):
        client.post("/api/contents/post-1/like")
        clock.advance(60_000)

        response = client.post("/api/contents/post-1/like")
        assert response.status_code == 200
        assert response.json()["likes_count"] == 7

    def test_forwarded_ips_are_independent(self, client):
        first = client.post(
            "/api/contents/post-1/like", headers={"X-Forwarded-For": "203.0.113.7"}
        )
        second = client.post(
            "/api/contents/post-1/like", headers={"X-Forwarded-For": "198.51.100.1, 10.0.0.1"}
        )
        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["likes_count"] == 7

    def test_unknown_content_returns_404(self, client):
        response = client.post("/api/contents/missing/like")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "NOT_FOUND"

    def test_unpublished_content_returns_404(self, client):
        assert client.post("/api/contents/draft-1/like").status_code == 404


class TestViewEndpoint:
    def test_view_without_session_generates_one(self, client):
        response = client.post("/api/contents/post-1/view")

        assert response.status_code == 200
        payload = response.json()
        assert payload["counted"] is True
        assert payload["view_count"] == 11
        assert payload["session_id"]

    def test_same_session_counts_once(self, client):
        first = client.post("/api/contents/post-1/view", json={"session_id": "sess-1"})
        second = client.post("/api/contents/post-1/view", json={"session_id": "sess-1"})

        assert first.json()["view_count"] == 11
        assert second.status_code == 200
        assert second.json()["counted"] is False
        assert second.json()["view_count"] == 11
        assert second.json()["session_id"] == "sess-1"

    def test_invalid_json_body_returns_422(self, client):
        response = client.post(
            "/api/contents/post-1/view",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_camel_case_session_id_is_accepted(self, client):
        first = client.post("/api/contents/post-1/view", json={"sessionId": "sess-9"})
        second = client.post("/api/contents/post-1/view", json={"session_id": "sess-9"})

        assert first.json()["session_id"] == "sess-9"
        assert second.json()["counted"] is False

    def test_oversized_session_id_is_rejected_before_dedup(self, client):
        response = client.post("/api/contents/post-1/view", json={"session_id": "s" * 129})

        assert response.status_code == 422
        assert len(client.app.state.view_cache) == 0
        follow_up = client.post("/api/contents/post-1/view", json={"session_id": "sess-1"})
        assert follow_up.json()["view_count"] == 11

    def test_session_id_at_limit_is_accepted(self, client):
        session_id = "s" * 128
        response = client.post("/api/contents/post-1/view", json={"session_id": session_id})

        assert response.status_code == 200
        assert response.json()["session_id"] == session_id

    def test_blank_session_id_is_replaced(self, client):
        response = client.post("/api/contents/post-1/view", json={"session_id": "   "})

        assert response.status_code == 200
        assert response.json()["session_id"].strip()

    def test_unknown_content_returns_404(self, client):
        assert client.post("/api/contents/missing/view", json={}).status_code == 404


class TestCommentEndpoints:
    def test_create_comment(self, client):
        data = _create_comment(client, body="<b>멋진</b> 사진이에요")

        assert data["body"] == "멋진 사진이에요"
        assert data["user_name"] == "홍길동"
        assert "password_hash" not in data
        assert "password" not in data

    def test_spam_comment_is_rejected(self, client):
        response = client.post(
            "/api/contents/post-1/comments",
            json={**VALID_COMMENT, "body": "좋은글 http://example.com 감사"},
        )

        assert response.status_code == 429
        detail = response.json()["detail"]
        assert detail["error"] == "SPAM_REJECTED"
        assert detail["reason"] == "CONTAINS_URL"

    def test_invalid_input_returns_400_with_field(self, client):
        response = client.post(
            "/api/contents/post-1/comments", json={**VALID_COMMENT, "user_name": "x!"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "user_name"

    def test_hashing_failure_returns_500(self, content_store, clock, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "text")
        get_settings.cache_clear()
        hasher = MagicMock()
        hasher.hash.side_effect = CredentialHashingError("falha argon2")
        app = create_app(content_store=content_store, clock=clock, hasher=hasher)

        with TestClient(app) as failing_client:
            response = failing_client.post("/api/contents/post-1/comments", json=VALID_COMMENT)
        get_settings.cache_clear()

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "HASHING_ERROR"
        assert response.json()["detail"]["message"] == "internal_hashing_error"
        assert content_store.list_comments(content_id="post-1")[1] == 0

    def test_missing_fields_return_400(self, client):
        response = client.post("/api/contents/post-1/comments", json={})
        assert response.status_code == 400

    def test_list_comments(self, client):
        _create_comment(client)
        _create_comment(client, body="두 번째 댓글 남겨요")
        _create_comment(client, content_id="post-2")

        response = client.get("/api/contents/post-1/comments", params={"limit": 1})

        assert response.status_code == 200
        payload = response.json()
        assert payload["count"] == 2
        assert len(payload["data"]) == 1
        assert payload["meta"]["has_next"] is True
        assert "password_hash" not in payload["data"][0]

    def test_delete_with_password(self, client):
        comment = _create_comment(client)
        url = f"/api/contents/post-1/comments/{comment['id']}"

        wrong = client.request("DELETE", url, json={"password": "0000"})
        assert wrong.status_code == 401
        assert wrong.json()["detail"]["error"] == "CREDENTIAL_MISMATCH"

        ok = client.request("DELETE", url, json={"password": "1234"})
        assert ok.status_code == 200

        listing = client.get("/api/contents/post-1/comments").json()
        assert listing["count"] == 0

    def test_delete_without_password_returns_400(self, client):
        comment = _create_comment(client)
        response = client.delete(f"/api/contents/post-1/comments/{comment['id']}")
        assert response.status_code == 400

    def test_admin_deletes_without_password(self, client, admin_headers):
        comment = _create_comment(client)
        response = client.delete(
            f"/api/contents/post-1/comments/{comment['id']}", headers=admin_headers
        )
        assert response.status_code == 200

    def test_delete_unknown_comment_returns_404(self, client):
        response = client.request(
            "DELETE", "/api/contents/post-1/comments/missing", json={"password": "1234"}
        )
        assert response.status_code == 404


class TestModerationEndpoints:
    def test_report_flow(self, client, admin_headers):
        comment = _create_comment(client)
        report_url = f"/api/contents/post-1/comments/{comment['id']}/report"

        assert client.post(report_url).status_code == 200
        again = client.post(report_url)
        assert again.status_code == 400
        assert again.json()["detail"]["error"] == "INVALID_STATE"

        reported = client.get("/api/admin/comments/reported", headers=admin_headers)
        assert reported.status_code == 200
        assert [c["id"] for c in reported.json()["data"]] == [comment["id"]]

        approve_url = f"/api/admin/comments/{comment['id']}/approve"
        assert client.post(approve_url, headers=admin_headers).status_code == 200
        assert client.post(approve_url, headers=admin_headers).status_code == 400

        reported = client.get("/api/admin/comments/reported", headers=admin_headers)
        assert reported.json()["count"] == 0

    def test_admin_routes_require_token(self, client):
        assert client.get("/api/admin/comments/reported").status_code == 403
        response = client.get(
            "/api/admin/comments/reported", headers={"Authorization": "Bearer wrong"}
        )
        assert response.status_code == 403

    def test_correlation_id_in_error_detail(self, client):
        response = client.post(
            "/api/contents/missing/like", headers={"X-Correlation-ID": "corr-42"}
        )
        assert response.json()["detail"]["correlation_id"] == "corr-42"


class TestHandlerExecution:
    def test_handlers_are_sync_and_run_in_threadpool(self):
        """Serviços usam locks e argon2 bloqueantes; nenhum handler pode ser async."""
        endpoints = [route.endpoint for route in router.routes]

        assert endpoints
        assert not [fn.__name__ for fn in endpoints if inspect.iscoroutinefunction(fn)]

    def test_delete_with_malformed_body_returns_422(self, client):
        comment = _create_comment(client)
        response = client.request(
            "DELETE",
            f"/api/contents/post-1/comments/{comment['id']}",
            content=b"{senha",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422
