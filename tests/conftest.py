# tests/conftest.py
from unittest.mock import MagicMock, patch

from django.apps import apps

import pytest
from rest_framework.test import APIClient

from domains.tracking.fallback import FallbackGenerator
from domains.tracking.registry import DEFAULT_PROVIDERS, build_default_registry
from domains.tracking.services import TrackingService
from domains.tracking.store import EventStore

# 모든 제공자에 테스트용 키 설정
TEST_TRACKING_CONFIG = {
    "HTTP_TIMEOUT": 3,
    "PROVIDERS": {
        name: {"credential": f"test-{name.lower()}-key", "endpoint": ""}
        for name, *_ in DEFAULT_PROVIDERS
    },
}


# ─────────────────────────────────────────────────────────────
# 앱 레지스트리: 키 없는 상태로 고정 (.env 영향 차단, 외부 호출 방지)
# ─────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _keyless_app_registry(monkeypatch):
    config = apps.get_app_config("tracking")
    monkeypatch.setattr(config, "registry", build_default_registry({}))
    return config.registry


@pytest.fixture
def configured_app_registry(monkeypatch):
    """HTTP API/태스크 테스트용: 앱 레지스트리를 키가 모두 설정된 것으로 교체"""
    config = apps.get_app_config("tracking")
    registry = build_default_registry(TEST_TRACKING_CONFIG)
    monkeypatch.setattr(config, "registry", registry)
    return registry


# ─────────────────────────────────────────────────────────────
# 레지스트리 / 서비스
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def registry():
    return build_default_registry(TEST_TRACKING_CONFIG)


@pytest.fixture
def keyless_registry():
    return build_default_registry({})


@pytest.fixture
def store():
    return EventStore()


@pytest.fixture
def service(registry, store):
    return TrackingService(registry, store=store, fallback=FallbackGenerator())


@pytest.fixture
def api_client():
    return APIClient()


# ─────────────────────────────────────────────────────────────
# 가짜 HTTP (requests.request 대체)
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def fake_response():
    """
    status_code / json() 만 흉내내는 응답 객체 팩토리.
    json_error=True 면 json() 이 ValueError 를 던진다.
    """

    def _make(status_code=200, payload=None, json_error=False):
        resp = MagicMock()
        resp.status_code = status_code
        if json_error:
            resp.json.side_effect = ValueError("Expecting value")
        else:
            resp.json.return_value = payload if payload is not None else {}
        return resp

    return _make


@pytest.fixture
def http():
    """어댑터가 호출하는 requests.request 를 MagicMock 으로 패치"""
    with patch("domains.tracking.adapters.base.requests.request") as mocked:
        yield mocked
