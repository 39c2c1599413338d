# domains/tracking/adapters/aviation.py
from __future__ import annotations

from typing import Any, Dict

from ..exceptions import UpstreamError
from ..results import UNKNOWN_LOCATION
from .base import CarrierAdapter, dig, make_event, make_result


def _airport(leg: Dict[str, Any]) -> str:
    name = leg.get("airport")
    code = leg.get("iata")
    if name and code:
        return f"{name} ({code})"
    return name or code or UNKNOWN_LOCATION


class AviationStackAdapter(CarrierAdapter):
    """AviationStack 항공편 조회 (access_key 쿼리 파라미터, 운항일 flight_date 선택)"""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        params = {
            "access_key": provider.credential,
            "flight_iata": identifier,
            "limit": 1,
        }
        flight_date = options.get("flight_date")
        if flight_date:
            # date 객체든 "YYYY-MM-DD" 문자열이든 ISO 형식으로
            params["flight_date"] = (
                flight_date.isoformat() if hasattr(flight_date, "isoformat") else str(flight_date)
            )
        return {"url": f"{provider.endpoint}/flights", "params": params}

    def parse(self, identifier, data, provider):
        flight = dig(data, "data", 0)
        if not isinstance(flight, dict):
            raise UpstreamError(f"Flight {identifier} not found", provider=provider.name)

        departure = flight.get("departure") or {}
        arrival = flight.get("arrival") or {}

        events = []
        departed_at = departure.get("actual") or departure.get("estimated") or departure.get("scheduled")
        if departed_at:
            events.append(
                make_event(
                    timestamp=departed_at,
                    location=_airport(departure),
                    status_code="departed" if departure.get("actual") else "scheduled_departure",
                    description=f"Departure from {_airport(departure)}",
                    provider=provider.name,
                )
            )
        if arrival.get("actual"):
            events.append(
                make_event(
                    timestamp=arrival.get("actual"),
                    location=_airport(arrival),
                    status_code="landed",
                    description=f"Arrival at {_airport(arrival)}",
                    provider=provider.name,
                )
            )

        status = flight.get("flight_status") or "unknown"
        # 착륙 전이면 출발 공항, 착륙했으면 도착 공항
        current = _airport(arrival) if arrival.get("actual") else _airport(departure)
        return make_result(
            identifier,
            provider,
            status=status,
            current_location=current,
            estimated_completion=arrival.get("estimated") or arrival.get("scheduled"),
            events=events,
            raw=data,
        )
