# domains/tracking/adapters/vizion.py
from __future__ import annotations

from typing import Any, Dict, List

from ..results import REFERENCE_BOOKING, TrackingEvent
from .base import CarrierAdapter, dig, join_location, make_event, make_result


def determine_status(events: List[TrackingEvent]) -> str:
    """
    마지막 이벤트 이름으로 컨테이너 상태 추정.
    """
    if not events:
        return "Unknown"
    name = (events[-1].status_code or "").lower()
    if "delivered" in name or "discharge" in name:
        return "Delivered"
    if "departure" in name or "sail" in name:
        return "In Transit"
    if "arrival" in name or "berth" in name:
        return "At Port"
    if "load" in name:
        return "Loading"
    return "In Transit"


class VizionAdapter(CarrierAdapter):
    """
    Vizion 컨테이너 통합 조회.
    - 컨테이너 번호: 선사 자동 판별(scac_code=None)
    - 예약번호(reference_type="booking"): booking_number + 선택적 scac_code
    형태가 선사 패턴과 겹쳐 자동 분류 대상에서는 빠지고, 힌트/예약번호 조회로만 사용.
    """

    supports_booking = True

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        if options.get("reference_type") == REFERENCE_BOOKING:
            body = {
                "booking_number": identifier,
                "scac_code": options.get("scac_code") or None,
            }
        else:
            body = {
                "container_number": identifier,
                "scac_code": options.get("scac_code") or None,
            }
        return {
            "url": f"{provider.endpoint}/track",
            "method": "POST",
            "headers": {
                "Authorization": f"Bearer {provider.credential}",
                "Content-Type": "application/json",
            },
            "json": body,
        }

    def parse(self, identifier, data, provider):
        events = [
            make_event(
                timestamp=loc.get("timestamp"),
                location=join_location(
                    dig(loc, "location", "name"),
                    dig(loc, "location", "country"),
                ),
                status_code=loc.get("event") or "Unknown Event",
                description=loc.get("description"),
                provider=provider.name,
            )
            for loc in data.get("locations") or []
        ]
        current = events[-1].location if events else dig(data, "vessel", "name")
        return make_result(
            identifier,
            provider,
            status=determine_status(events),
            current_location=current,
            estimated_completion=data.get("estimated_arrival"),
            events=events,
            raw=data,
        )
