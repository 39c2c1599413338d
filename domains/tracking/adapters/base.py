# domains/tracking/adapters/base.py
from __future__ import annotations

import logging
from datetime import datetime, time, timezone as dt_timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import quote

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

import requests

from ..exceptions import ProviderUnavailable, TrackingError, UpstreamError
from ..results import (
    DEFAULT_STATUS,
    UNKNOWN_LOCATION,
    UNSPECIFIED_LOCATION,
    NormalizedTrackingResult,
    TrackingEvent,
)

if TYPE_CHECKING:
    from ..registry import Provider

logger = logging.getLogger(__name__)


class CarrierAdapter:
    """
    각 제공자 어댑터의 공통 흐름.
    - 요청 만들기(build_request) → 네트워크 1회 호출 → 응답 매핑(parse)
    - 재시도/캐시/제공자 간 판단은 하지 않는다
    - options: 호출부가 넘긴 조회 옵션 (예약번호 조회, 운항일 등). 모르는 옵션은 무시
    """

    # 예약번호(booking) 조회 지원 여부
    supports_booking = False

    def track(
        self, identifier: str, provider: "Provider", **options: Any
    ) -> NormalizedTrackingResult:
        if not provider.is_configured:
            raise ProviderUnavailable(
                f"{provider.name} API key is not configured", provider=provider.name
            )

        request = self.build_request(identifier, provider, **options)
        data = self._send(provider, **request)

        try:
            return self.parse(identifier, data, provider)
        except TrackingError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UpstreamError(
                f"Malformed {provider.name} payload: {e}", provider=provider.name
            ) from e

    def build_request(
        self, identifier: str, provider: "Provider", **options: Any
    ) -> Dict[str, Any]:
        """
        requests.request 에 넘길 인자(dict).
        키: url, method, headers, params, json
        """
        raise NotImplementedError

    def parse(
        self, identifier: str, data: Any, provider: "Provider"
    ) -> NormalizedTrackingResult:
        """제공자 응답(JSON) → NormalizedTrackingResult"""
        raise NotImplementedError

    def _send(
        self,
        provider: "Provider",
        *,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {"Accept": "application/json", **(headers or {})}
        logger.info("Fetching %s tracking: %s %s", provider.name, method, url)
        try:
            resp = requests.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                timeout=provider.timeout,
            )
        except requests.Timeout as e:
            raise UpstreamError(f"{provider.name} API timeout", provider=provider.name) from e
        except requests.RequestException as e:
            raise UpstreamError(
                f"{provider.name} API request failed: {e}", provider=provider.name
            ) from e

        # 200~299만 통과
        if not (200 <= resp.status_code < 300):
            logger.warning("%s non-2xx: %s", provider.name, resp.status_code)
            raise UpstreamError(
                f"{provider.name} API error: {resp.status_code}", provider=provider.name
            )

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(
                f"Invalid {provider.name} JSON response", provider=provider.name
            ) from e


# ---------------------------------------------------------------------------
# 매핑 헬퍼
# ---------------------------------------------------------------------------
def dig(data: Any, *path, default=None):
    """중첩 dict/list 에서 값을 안전하게 꺼낸다. 중간에 없으면 default."""
    cur = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, (list, tuple)) or not (-len(cur) <= key < len(cur)):
                return default
            cur = cur[key]
        else:
            if not isinstance(cur, dict):
                return default
            cur = cur.get(key)
        if cur is None:
            return default
    return cur


def parse_timestamp(value: Any, *, provider: str = "") -> datetime:
    """
    업스트림 시각 → aware datetime(UTC 기준).
    비었거나 해석 불가하면 UpstreamError (조용히 기본값으로 대체하지 않음).
    """
    if isinstance(value, datetime):
        dt: Optional[datetime] = value
    else:
        s = str(value if value is not None else "").strip()
        dt = None
        if s:
            try:
                dt = parse_datetime(s)
                if dt is None:
                    d = parse_date(s)
                    dt = datetime.combine(d, time.min) if d else None
            except ValueError:
                dt = None
    if dt is None:
        raise UpstreamError(f"Malformed timestamp from {provider or 'provider'}: {value!r}",
                            provider=provider)
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, timezone=dt_timezone.utc)
    return dt


def parse_optional_timestamp(value: Any, *, provider: str = "") -> Optional[datetime]:
    if value in (None, ""):
        return None
    return parse_timestamp(value, provider=provider)


def join_location(*parts: Any, default: str = UNSPECIFIED_LOCATION) -> str:
    joined = ", ".join(str(p).strip() for p in parts if p and str(p).strip())
    return joined or default


def make_event(
    *, timestamp: Any, location: Any, status_code: Any, description: Any, provider: str
) -> TrackingEvent:
    code = str(status_code or "")
    return TrackingEvent(
        timestamp=parse_timestamp(timestamp, provider=provider),
        location=str(location or UNSPECIFIED_LOCATION),
        status_code=code,
        description=str(description or code),
    )


def make_result(
    identifier: str,
    provider: "Provider",
    *,
    status: Any,
    current_location: Any,
    events: List[TrackingEvent],
    raw: Any,
    estimated_completion: Any = None,
) -> NormalizedTrackingResult:
    return NormalizedTrackingResult(
        tracking_number=identifier,
        status=str(status or DEFAULT_STATUS),
        current_location=str(current_location or UNKNOWN_LOCATION),
        observed_at=timezone.now(),
        estimated_completion=parse_optional_timestamp(
            estimated_completion, provider=provider.name
        ),
        events=events,
        provider=provider.name,
        raw=raw,
    )


def path_segment(identifier: Any) -> str:
    """URL 경로에 넣을 식별자. '/', '?' 등은 모두 이스케이프."""
    return quote(str(identifier), safe="")
