"""
Unit tests for the HTTP surface.

Uses FastAPI TestClient with dependency overrides: the provider is a
ScriptedLLMClient behind a real RetryEngine, and the analytics repository
is a mock.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from trivia_service.api.auth import AdminSessionSigner
from trivia_service.api.dependencies import (
    get_async_repository,
    get_llm_client,
    get_rate_limiter,
    get_retry_engine,
    get_session_signer,
    get_settings,
)
from trivia_service.main import app
from trivia_service.models.enums import FinishSignal, RankingPeriod
from trivia_service.models.output_models import DailyCount, RankedKeyword
from trivia_service.ratelimit.limiter import SlidingWindowRateLimiter
from trivia_service.retry.engine import RetryEngine

FLASH = "gemini-2.0-flash"


@pytest.fixture
def rate_limiter():
    return SlidingWindowRateLimiter(limit=10, window=60.0)


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.redis = MagicMock()
    repo.record_keyword = AsyncMock(return_value=True)
    repo.rank_keywords = AsyncMock(return_value=[])
    repo.daily_counts = AsyncMock(return_value=[])
    repo.list_genres = AsyncMock(return_value=["食べ物", "その他"])
    return repo


@pytest.fixture
def signer():
    return AdminSessionSigner(password="hunter2", secret="s3cret")


@pytest.fixture
def llm_client(scripted_client, invocation, make_text):
    return scripted_client({
        FLASH: [invocation(FLASH, make_text(60)), invocation(FLASH, make_text(85))],
    })


@pytest.fixture
def client(test_settings, prompt_builder, llm_client, rate_limiter, repository, signer):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_async_repository] = lambda: repository
    app.dependency_overrides[get_session_signer] = lambda: signer
    app.dependency_overrides[get_llm_client] = lambda: llm_client
    app.dependency_overrides[get_retry_engine] = lambda: RetryEngine(
        llm_client=llm_client, prompt_builder=prompt_builder, settings=test_settings
    )
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestTriviaEndpoint:

    def test_success(self, client, llm_client, repository, make_text):
        response = client.post("/api/trivia", json={"keyword": "  カレー "})

        assert response.status_code == 200
        body = response.json()
        assert body["trivia"] == make_text(85)
        assert body["keyword"] == "カレー"
        assert body["mode"] == "kitakyushu"
        assert body["model"] == FLASH
        assert body["retries"] == 1
        assert body["fallback"] is False
        assert body["createdAt"].endswith("Z")
        assert response.headers["X-Request-ID"]
        repository.record_keyword.assert_awaited_once_with("カレー")

    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"keyword": "   "}, "単語を入れてください。"),
            ({}, "単語を入れてください。"),
            ({"keyword": None}, "単語を入れてください。"),
            ({"keyword": "あ" * 31}, "30文字以内で入力してください。"),
        ],
    )
    def test_invalid_keyword_never_calls_provider(self, client, llm_client, repository, payload, message):
        response = client.post("/api/trivia", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": {"code": "validation_error", "message": message}}
        assert llm_client.calls == []
        repository.record_keyword.assert_not_awaited()

    def test_malformed_body(self, client, llm_client):
        response = client.post(
            "/api/trivia", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"
        assert llm_client.calls == []

    def test_missing_api_key(self, client, test_settings, rate_limiter):
        test_settings.GEMINI_API_KEY = "   "

        response = client.post("/api/trivia", json={"keyword": "カレー"})

        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "config_error", "message": "APIキーが設定されていません。"}
        }
        assert rate_limiter.tracked_keys == 0

    def test_rate_limit(self, client, rate_limiter):
        rate_limiter.limit = 2
        headers = {"X-Forwarded-For": "198.51.100.7"}

        # Invalid requests consume quota too
        assert client.post("/api/trivia", json={"keyword": ""}, headers=headers).status_code == 400
        assert client.post("/api/trivia", json={"keyword": ""}, headers=headers).status_code == 400
        response = client.post("/api/trivia", json={"keyword": "カレー"}, headers=headers)

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "rate_limited"
        assert response.json()["error"]["message"] == "ちょっと落ち着いて、もう一口。（1分あたりの上限に達しました）"
        assert 1 <= int(response.headers["Retry-After"]) <= 60

        other = client.post("/api/trivia", json={"keyword": ""}, headers={"X-Forwarded-For": "203.0.113.9"})
        assert other.status_code == 400

    def test_generation_failure(self, client, test_settings, prompt_builder, scripted_client, invocation):
        failing = scripted_client({
            model: [invocation(model, None, FinishSignal.NOT_FOUND)]
            for model in [config.name for config in test_settings.MODEL_CONFIGS]
        })
        app.dependency_overrides[get_retry_engine] = lambda: RetryEngine(
            llm_client=failing, prompt_builder=prompt_builder, settings=test_settings
        )

        response = client.post("/api/trivia", json={"keyword": "カレー"})

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "generation_failed",
            "message": "トリビアの生成に失敗しました。もう一度お試しください。",
        }

    def test_fallback_answer(self, client, test_settings, prompt_builder, scripted_client, invocation, make_text):
        truncated = scripted_client({
            model: [invocation(model, make_text(40), FinishSignal.TRUNCATED)]
            for model in [config.name for config in test_settings.MODEL_CONFIGS]
        })
        app.dependency_overrides[get_retry_engine] = lambda: RetryEngine(
            llm_client=truncated, prompt_builder=prompt_builder, settings=test_settings
        )

        body = client.post("/api/trivia", json={"keyword": "カレー"}).json()

        assert body["model"] == "fallback"
        assert body["fallback"] is True
        assert len(body["trivia"]) == 40

    def test_unexpected_error(self, client):
        engine = MagicMock()
        engine.execute_with_retry = AsyncMock(side_effect=RuntimeError("boom"))
        app.dependency_overrides[get_retry_engine] = lambda: engine

        response = client.post("/api/trivia", json={"keyword": "カレー"})

        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "generation_failed", "message": "サーバーエラーが発生しました。"}
        }

    def test_keyword_logging_failure_is_invisible(self, client, repository):
        repository.record_keyword.side_effect = RuntimeError("redis down")

        response = client.post("/api/trivia", json={"keyword": "カレー"})

        assert response.status_code == 200

    def test_celery_dispatch(self, client, test_settings, repository):
        test_settings.KEYWORD_LOG_DISPATCH = "celery"

        with patch("trivia_service.tasks.keyword_tasks.record_keyword_task.delay") as delay:
            response = client.post("/api/trivia", json={"keyword": "カレー"})

        assert response.status_code == 200
        delay.assert_called_once_with("カレー")
        repository.record_keyword.assert_not_awaited()


class TestAdminEndpoints:

    def login(self, client, password="hunter2"):
        return client.post("/api/admin/login", json={"password": password})

    def test_login_sets_session_cookie(self, client):
        response = self.login(client)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("admin_token=")
        assert "httponly" in cookie
        assert "samesite=strict" in cookie
        assert "max-age=86400" in cookie
        assert "secure" not in cookie

    def test_login_wrong_password(self, client):
        response = self.login(client, password="nope")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthorized"

    def test_login_without_configured_password(self, client):
        app.dependency_overrides[get_session_signer] = lambda: AdminSessionSigner(password="")

        response = self.login(client, password="")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "config_error"

    def test_login_malformed_body(self, client):
        response = client.post("/api/admin/login", json={"pass": "hunter2"})

        assert response.status_code == 400

    def test_stats_requires_session(self, client, repository):
        response = client.get("/api/admin/stats")

        assert response.status_code == 401
        repository.rank_keywords.assert_not_awaited()

    def test_stats_rejects_forged_cookie(self, client):
        client.cookies.set("admin_token", "1700000000.deadbeef")

        assert client.get("/api/admin/stats").status_code == 401

    def test_stats(self, client, repository):
        repository.rank_keywords.return_value = [RankedKeyword(keyword="カレー", count=3, genre="食べ物")]
        repository.daily_counts.return_value = [DailyCount(date="2026-03-10", count=3)]
        self.login(client)

        response = client.get("/api/admin/stats", params={"period": "7days", "genre": "食べ物"})

        assert response.status_code == 200
        assert response.json() == {
            "ranking": [{"keyword": "カレー", "count": 3, "genre": "食べ物"}],
            "trend": [{"date": "2026-03-10", "count": 3}],
            "genres": ["食べ物", "その他"],
            "period": "7days",
            "currentGenre": "食べ物",
        }
        repository.rank_keywords.assert_awaited_once_with(RankingPeriod.SEVEN_DAYS, 50, "食べ物")
        repository.daily_counts.assert_awaited_once_with(30)

    def test_stats_defaults(self, client, repository):
        self.login(client)

        body = client.get("/api/admin/stats").json()

        assert body["period"] == "all"
        assert body["currentGenre"] is None
        repository.rank_keywords.assert_awaited_once_with(RankingPeriod.ALL, 50, None)

    def test_stats_invalid_period(self, client):
        self.login(client)

        response = client.get("/api/admin/stats", params={"period": "yesterday"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    def test_logout(self, client):
        self.login(client)
        assert client.get("/api/admin/stats").status_code == 200

        response = client.post("/api/admin/logout")

        assert response.status_code == 200
        assert client.get("/api/admin/stats").status_code == 401


class TestServiceEndpoints:

    def test_health_healthy(self, client, llm_client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"] == {"config": "ok", "gemini": "ok", "redis": "disabled"}

    def test_health_without_api_key(self, client, test_settings):
        test_settings.GEMINI_API_KEY = ""

        body = client.get("/health").json()

        assert body["status"] == "unhealthy"
        assert body["services"]["gemini"] == "not_configured"

    def test_health_degraded_when_provider_down(self, client):
        down = MagicMock()
        down.health_check = AsyncMock(return_value=False)
        app.dependency_overrides[get_llm_client] = lambda: down

        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["services"]["gemini"] == "unreachable"

    def test_root(self, client):
        body = client.get("/").json()

        assert body["health"] == "/health"
        assert "version" in body
