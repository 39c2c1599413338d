# domains/tracking/adapters/ocean.py
from __future__ import annotations

from typing import Any, Dict

from .base import CarrierAdapter, dig, make_event, make_result, path_segment


class MaerskAdapter(CarrierAdapter):
    """Maersk Line Track & Trace (Bearer 토큰)"""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": f"{provider.endpoint}/{path_segment(identifier)}",
            "headers": {
                "Authorization": f"Bearer {provider.credential}",
                "Content-Type": "application/json",
            },
        }

    def parse(self, identifier, data, provider):
        events = [
            make_event(
                timestamp=ev.get("eventDateTime"),
                location=ev.get("eventLocation"),
                status_code=ev.get("eventType"),
                description=ev.get("eventDescription"),
                provider=provider.name,
            )
            for ev in data.get("trackingEvents") or []
        ]
        return make_result(
            identifier,
            provider,
            status=dig(data, "transportPlan", "transportPlanStages", 0, "transportMode"),
            current_location=dig(data, "shipmentJourney", "currentLocation"),
            estimated_completion=data.get("estimatedTimeOfArrival"),
            events=events,
            raw=data,
        )


class CoscoAdapter(CarrierAdapter):
    """COSCO Shipping (X-API-Key 헤더)"""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": f"{provider.endpoint}/{path_segment(identifier)}",
            "headers": {
                "X-API-Key": provider.credential,
                "Content-Type": "application/json",
            },
        }

    def parse(self, identifier, data, provider):
        events = [
            make_event(
                timestamp=ev.get("date"),
                location=ev.get("location"),
                status_code=ev.get("status"),
                description=ev.get("description"),
                provider=provider.name,
            )
            for ev in data.get("events") or []
        ]
        return make_result(
            identifier,
            provider,
            status=data.get("status"),
            current_location=data.get("currentLocation"),
            estimated_completion=data.get("eta"),
            events=events,
            raw=data,
        )


class MSCAdapter(CarrierAdapter):
    """MSC Cargo (Bearer 토큰)"""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": f"{provider.endpoint}/{path_segment(identifier)}",
            "headers": {
                "Authorization": f"Bearer {provider.credential}",
                "Content-Type": "application/json",
            },
        }

    def parse(self, identifier, data, provider):
        events = [
            make_event(
                timestamp=ev.get("eventDate"),
                location=ev.get("location"),
                status_code=ev.get("eventType"),
                description=ev.get("description"),
                provider=provider.name,
            )
            for ev in data.get("trackingHistory") or []
        ]
        return make_result(
            identifier,
            provider,
            status=data.get("currentStatus"),
            current_location=data.get("currentLocation"),
            estimated_completion=data.get("estimatedArrival"),
            events=events,
            raw=data,
        )
