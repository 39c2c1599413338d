# domains/tracking/unified.py
from __future__ import annotations

from typing import Optional

from .classifier import FLIGHT_NUMBER_PATTERN, MMSI_PATTERN, normalize_identifier
from .registry import MODALITIES, MODALITY_AVIATION, MODALITY_GROUND, MODALITY_MARITIME
from .results import NormalizedTrackingResult

MODALITY_AUTO = "auto"


def resolve_modality(identifier: str, modality_hint: Optional[str] = MODALITY_AUTO) -> str:
    """
    모달리티 결정.
    - 명시 힌트(aviation/maritime/ground)는 그대로 사용
    - auto: 항공편 번호 → MMSI(9자리 숫자) → 그 외 ground 순서
    """
    hint = (modality_hint or MODALITY_AUTO).strip().lower()
    if hint in MODALITIES:
        return hint
    if hint != MODALITY_AUTO:
        raise ValueError(f"Unknown modality '{modality_hint}'")

    normalized = normalize_identifier(identifier)
    if FLIGHT_NUMBER_PATTERN.match(normalized):
        return MODALITY_AVIATION
    if MMSI_PATTERN.match(normalized):
        return MODALITY_MARITIME
    return MODALITY_GROUND


def track_unified(
    identifier: str, modality_hint: Optional[str] = MODALITY_AUTO, service=None, **options
) -> NormalizedTrackingResult:
    if service is None:
        from .services import get_tracking_service

        service = get_tracking_service()
    return service.track_unified(identifier, modality_hint, **options)
