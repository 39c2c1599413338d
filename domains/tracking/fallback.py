# domains/tracking/fallback.py
"""
실데이터를 얻지 못했을 때 돌려주는 합성(placeholder) 결과.

- provider 는 항상 "fallback", degraded=True, raw["demo"]=True 로 표시
- 이벤트는 식별자 형태를 설명하는 합성 이벤트 정확히 1개
- 좌표 등 실데이터처럼 보일 수 있는 값은 만들지 않는다
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from django.utils import timezone

from .classifier import SHAPE_LABELS, describe_shape
from .results import NormalizedTrackingResult, TrackingEvent

FALLBACK_PROVIDER = "fallback"

REASON_NO_CREDENTIAL = "no_credential"
REASON_UPSTREAM_ERROR = "upstream_error"
REASON_UNRECOGNIZED = "unrecognized_identifier"

_STATUS_MESSAGES = {
    REASON_NO_CREDENTIAL: "Limited data - {provider} API key is not configured",
    REASON_UPSTREAM_ERROR: "Live data unavailable - {provider} did not return a usable response",
    REASON_UNRECOGNIZED: "Identifier not recognized - no tracking provider matches this format",
}

_HINTS = {
    REASON_NO_CREDENTIAL: "Configure the provider API key for real-time tracking.",
    REASON_UPSTREAM_ERROR: "Try again later or check the provider status.",
    REASON_UNRECOGNIZED: "Specify the provider or modality explicitly.",
}


class FallbackGenerator:
    """폴백 결과 생성기. 명시적으로 호출될 때만 동작 (데모 모드)."""

    source_label = "Demo placeholder"
    current_location = "Live tracking unavailable"

    def generate(
        self,
        identifier: str,
        provider_name: str = "",
        reason: str = REASON_UPSTREAM_ERROR,
        *,
        now: Optional[datetime] = None,
        detail: str = "",
    ) -> NormalizedTrackingResult:
        if reason not in _STATUS_MESSAGES:
            reason = REASON_UPSTREAM_ERROR
        now = now or timezone.now()
        identifier = str(identifier if identifier is not None else "")
        shape = describe_shape(identifier)
        label = SHAPE_LABELS[shape]

        if provider_name:
            description = f"Identifier looks like a {provider_name} {label}. {_HINTS[reason]}"
        else:
            description = f"Identifier looks like a {label}. {_HINTS[reason]}"

        event = TrackingEvent(
            timestamp=now,
            location=self.source_label,
            status_code="info",
            description=description,
        )
        return NormalizedTrackingResult(
            tracking_number=identifier,
            status=_STATUS_MESSAGES[reason].format(provider=provider_name or "provider"),
            current_location=self.current_location,
            observed_at=now,
            estimated_completion=None,
            events=[event],
            provider=FALLBACK_PROVIDER,
            raw={
                "demo": True,
                "attempted_provider": provider_name or None,
                "detected_type": shape,
                "reason": reason,
                "detail": detail,
            },
            degraded=True,
            reason=reason,
        )


def generate_fallback(
    identifier: str,
    provider_name: str = "",
    reason: str = REASON_UPSTREAM_ERROR,
    *,
    now: Optional[datetime] = None,
) -> NormalizedTrackingResult:
    return FallbackGenerator().generate(identifier, provider_name, reason, now=now)
