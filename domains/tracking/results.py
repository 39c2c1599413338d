# domains/tracking/results.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

# 업스트림 필드가 비어 있을 때 채우는 기본값 (null 대신 항상 문자열)
DEFAULT_STATUS = "In transit"
UNKNOWN_LOCATION = "Unknown location"
UNSPECIFIED_LOCATION = "Unspecified"

# 조회 대상 식별자 종류 (컨테이너 번호 / 선적 예약번호)
REFERENCE_CONTAINER = "container"
REFERENCE_BOOKING = "booking"
REFERENCE_TYPES = (REFERENCE_CONTAINER, REFERENCE_BOOKING)


@dataclass(frozen=True)
class TrackingEvent:
    """
    단일 트래킹 이벤트. 생성 후 변경하지 않는다.
    """

    timestamp: datetime
    location: str
    status_code: str
    description: str


@dataclass
class NormalizedTrackingResult:
    """
    제공자와 무관한 공통 결과 스키마.
    - events: 제공자가 돌려준 순서 그대로 (보통 오래된 것 → 최신)
    - provider: 결과를 만든 제공자 이름, 혹은 "fallback"
    - raw: 감사/디버깅용 원본 payload
    - degraded/reason: 폴백 결과 여부와 사유
    """

    tracking_number: str
    status: str
    current_location: str
    observed_at: datetime
    estimated_completion: Optional[datetime] = None
    events: List[TrackingEvent] = field(default_factory=list)
    provider: str = ""
    raw: Any = None
    degraded: bool = False
    reason: str = ""
