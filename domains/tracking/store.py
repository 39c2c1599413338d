# domains/tracking/store.py
from __future__ import annotations

from typing import Any, List

from .classifier import normalize_identifier
from .models import TrackingEventRecord
from .results import TrackingEvent

_MAX_KEY = TrackingEventRecord._meta.get_field("tracking_number").max_length
_MAX_STATUS = TrackingEventRecord._meta.get_field("status").max_length
_MAX_LOCATION = TrackingEventRecord._meta.get_field("location").max_length


def _key(tracking_number: str) -> str:
    return normalize_identifier(tracking_number)[:_MAX_KEY]


class EventStore:
    """
    DB 기반 이벤트 저장소. append 는 단일 insert 이므로 별도 락 없이 동시 호출 가능.
    """

    def append(
        self,
        tracking_number: str,
        provider: str,
        event: TrackingEvent,
        raw: Any = None,
    ) -> None:
        TrackingEventRecord.objects.create(
            tracking_number=_key(tracking_number),
            provider=provider,
            status=(event.status_code or "")[:_MAX_STATUS],
            location=(event.location or "")[:_MAX_LOCATION],
            description=event.description or "",
            event_time=event.timestamp,
            raw_payload=raw,
        )

    def query(self, tracking_number: str) -> List[TrackingEvent]:
        """수신 순서(오래된 것 먼저)로 이벤트 목록 반환."""
        qs = TrackingEventRecord.objects.filter(
            tracking_number=_key(tracking_number)
        ).order_by("received_at", "id")
        return [record.to_event() for record in qs]
