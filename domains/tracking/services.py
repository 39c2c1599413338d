# domains/tracking/services.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.apps import apps

from .classifier import classify, normalize_identifier
from .exceptions import ClassificationFailed, ProviderUnavailable, UpstreamError
from .fallback import (
    REASON_NO_CREDENTIAL,
    REASON_UNRECOGNIZED,
    REASON_UPSTREAM_ERROR,
    FallbackGenerator,
)
from .registry import MODALITY_AVIATION, MODALITY_MARITIME, Provider, ProviderRegistry
from .results import REFERENCE_BOOKING, NormalizedTrackingResult, TrackingEvent
from .store import EventStore
from .unified import resolve_modality

logger = logging.getLogger(__name__)

# 명시적으로 지정하면 형태와 무관하게 해당 모달리티 제공자로 보내는 모달리티
DIRECT_MODALITIES = (MODALITY_AVIATION, MODALITY_MARITIME)


class TrackingService:
    """
    식별자 → 제공자 선택 → 어댑터 호출(1회) → 결과 저장 → 반환.
    잘못된 provider_hint 외에는 호출부로 예외를 올리지 않는다.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        store: Optional[EventStore] = None,
        fallback: Optional[FallbackGenerator] = None,
    ):
        self.registry = registry
        self.store = store if store is not None else EventStore()
        self.fallback = fallback if fallback is not None else FallbackGenerator()

    def track_shipment(
        self,
        identifier: str,
        provider_hint: Optional[str] = None,
        modality: Optional[str] = None,
        *,
        reference_type: Optional[str] = None,
        scac_code: Optional[str] = None,
        flight_date: Any = None,
    ) -> NormalizedTrackingResult:
        """
        reference_type="booking" 이면 예약번호 조회 가능한 제공자로 보낸다.
        scac_code / flight_date 는 해당 제공자 요청에만 반영된다.
        """
        normalized = normalize_identifier(identifier)
        provider = self._select_provider(normalized, provider_hint, modality, reference_type)

        options = {
            key: value
            for key, value in (
                ("reference_type", reference_type),
                ("scac_code", scac_code),
                ("flight_date", flight_date),
            )
            if value
        }

        try:
            if provider is None:
                raise ClassificationFailed(f"No provider matches '{normalized}'")
            result = provider.build_adapter().track(normalized, provider, **options)
        except ClassificationFailed as e:
            logger.info("Tracking provider undetected for %r: %s", identifier, e)
            result = self.fallback.generate(
                identifier, "", REASON_UNRECOGNIZED, detail=str(e)
            )
        except ProviderUnavailable as e:
            logger.warning("Tracking %s unavailable: %s", provider.name, e)
            result = self.fallback.generate(
                identifier, provider.name, REASON_NO_CREDENTIAL, detail=str(e)
            )
        except UpstreamError as e:
            logger.warning("Tracking %s upstream error: %s", provider.name, e)
            result = self.fallback.generate(
                identifier, provider.name, REASON_UPSTREAM_ERROR, detail=str(e)
            )
        except Exception as e:
            logger.exception("Unexpected error tracking %r with %s", identifier, provider.name)
            result = self.fallback.generate(
                identifier, provider.name, REASON_UPSTREAM_ERROR, detail=str(e)
            )
        else:
            # 결과의 tracking_number 는 호출부 입력을 그대로 돌려준다
            result.tracking_number = identifier

        self._persist(normalized, result)
        return result

    def track_unified(
        self, identifier: str, modality_hint: Optional[str] = "auto", **options: Any
    ) -> NormalizedTrackingResult:
        modality = resolve_modality(identifier, modality_hint)
        return self.track_shipment(identifier, modality=modality, **options)

    def _select_provider(
        self,
        normalized: str,
        provider_hint: Optional[str],
        modality: Optional[str],
        reference_type: Optional[str],
    ) -> Optional[Provider]:
        # 힌트가 있으면 분류를 건너뛴다 (모르는 이름이면 UnknownProviderHint 전파)
        if provider_hint:
            return self.registry.get(provider_hint)
        if not normalized:
            return None

        if reference_type == REFERENCE_BOOKING:
            return next(
                (p for p in self.registry.for_modality(modality) if p.adapter.supports_booking),
                None,
            )

        provider = classify(normalized, self.registry, modality=modality)
        if provider is None and modality in DIRECT_MODALITIES:
            # 항공/해상은 형태가 맞지 않아도 해당 모달리티의 첫 제공자에 그대로 조회
            candidates = self.registry.for_modality(modality)
            provider = candidates[0] if candidates else None
        return provider

    def history(self, tracking_number: str) -> List[TrackingEvent]:
        return self.store.query(tracking_number)

    def provider_status(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": p.name,
                "modality": p.modality,
                "category": p.category,
                "configured": p.is_configured,
                "auto_detect": p.pattern is not None,
            }
            for p in self.registry
        ]

    def _persist(self, key: str, result: NormalizedTrackingResult) -> None:
        # 이벤트마다 독립 insert. 실패는 로그만 남기고 나머지 이벤트와 결과 반환은 계속
        for event in result.events:
            try:
                self.store.append(key, result.provider, event, raw=result.raw)
            except Exception:
                logger.exception(
                    "Failed to persist %s tracking event for %r", event.status_code, key
                )


def get_tracking_service() -> TrackingService:
    """앱 시작 시 만들어 둔 레지스트리로 서비스 구성."""
    config = apps.get_app_config("tracking")
    return TrackingService(config.registry)
