# domains/tracking/classifier.py
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .registry import Provider, ProviderRegistry

_WHITESPACE = re.compile(r"\s+")

# 모달리티 추정용 형태 패턴 (정규화된 식별자 기준)
FLIGHT_NUMBER_PATTERN = re.compile(r"^([A-Z]{2}|[A-Z]\d|\d[A-Z])[A-Z]?\d{1,4}[A-Z]?$")
MMSI_PATTERN = re.compile(r"^\d{9}$")
CONTAINER_PATTERN = re.compile(r"^[A-Z]{4}\d")
PARCEL_PATTERN = re.compile(r"^(1Z[0-9A-Z]{16}|\d{10,22})$")

SHAPE_CONTAINER = "container"
SHAPE_FLIGHT = "flight"
SHAPE_MMSI = "mmsi"
SHAPE_PARCEL = "parcel"
SHAPE_UNKNOWN = "unknown"

SHAPE_LABELS = {
    SHAPE_CONTAINER: "container number",
    SHAPE_FLIGHT: "flight number",
    SHAPE_MMSI: "vessel MMSI",
    SHAPE_PARCEL: "parcel tracking number",
    SHAPE_UNKNOWN: "unrecognized identifier",
}


def normalize_identifier(raw) -> str:
    """공백 전부 제거 + 대문자화. 매칭/외부 호출/저장 키에 공통으로 사용."""
    return _WHITESPACE.sub("", str(raw or "")).upper()


def classify(
    identifier: str,
    registry: "ProviderRegistry",
    modality: Optional[str] = None,
) -> Optional["Provider"]:
    """
    등록 순서대로 패턴을 검사해 첫 번째로 일치하는 제공자를 반환.
    일치하는 것이 없으면 None (오류 아님).
    패턴이 겹치면 먼저 등록된 쪽이 이긴다.
    """
    normalized = normalize_identifier(identifier)
    if not normalized:
        return None
    for provider in registry.for_modality(modality):
        if provider.matches(normalized):
            return provider
    return None


def describe_shape(identifier: str) -> str:
    normalized = normalize_identifier(identifier)
    if CONTAINER_PATTERN.match(normalized):
        return SHAPE_CONTAINER
    if MMSI_PATTERN.match(normalized):
        return SHAPE_MMSI
    if FLIGHT_NUMBER_PATTERN.match(normalized):
        return SHAPE_FLIGHT
    if PARCEL_PATTERN.match(normalized):
        return SHAPE_PARCEL
    return SHAPE_UNKNOWN
