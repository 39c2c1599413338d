# domains/tracking/adapters/parcel.py
from __future__ import annotations

from typing import Any, Dict

from .base import CarrierAdapter, dig, join_location, make_event, make_result, path_segment


class FedExAdapter(CarrierAdapter):
    """FedEx Track API. 조회도 POST 바디로 보낸다."""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": provider.endpoint,
            "method": "POST",
            "headers": {
                "Authorization": f"Bearer {provider.credential}",
                "Content-Type": "application/json",
                "X-locale": "en_US",
            },
            "json": {
                "includeDetailedScans": True,
                "trackingInfo": [{"trackingNumberInfo": {"trackingNumber": identifier}}],
            },
        }

    def parse(self, identifier, data, provider):
        info = dig(data, "output", "completeTrackResults", 0, "trackResults", 0, default={})
        events = [
            make_event(
                timestamp=ev.get("date"),
                location=join_location(
                    dig(ev, "scanLocation", "city"),
                    dig(ev, "scanLocation", "countryCode"),
                ),
                status_code=ev.get("eventType"),
                description=ev.get("eventDescription"),
                provider=provider.name,
            )
            for ev in info.get("scanEvents") or []
        ]
        return make_result(
            identifier,
            provider,
            status=dig(info, "latestStatusDetail", "description"),
            current_location=dig(info, "latestStatusDetail", "scanLocation", "city"),
            estimated_completion=dig(
                info, "estimatedDeliveryTimeWindow", "window", "begins"
            ),
            events=events,
            raw=data,
        )


def _ups_date(value: Any) -> str:
    """UPS 는 날짜를 YYYYMMDD 로 준다. deliveryDate 는 [{"type":..., "date":...}] 형태일 수도 있음."""
    if isinstance(value, list):
        value = dig(value, 0, "date")
    s = str(value or "").strip()
    if len(s) == 8 and s.isdigit():
        return f"{s[:4]}-{s[4:6]}-{s[6:]}"
    return s


def _ups_time(value: Any) -> str:
    s = str(value or "").strip()
    if len(s) == 6 and s.isdigit():
        return f"{s[:2]}:{s[2:4]}:{s[4:]}"
    return s


class UPSAdapter(CarrierAdapter):
    """UPS Tracking API (Bearer 토큰)"""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": f"{provider.endpoint}/{path_segment(identifier)}",
            "headers": {
                "Authorization": f"Bearer {provider.credential}",
                "Content-Type": "application/json",
            },
        }

    def parse(self, identifier, data, provider):
        package = dig(data, "trackResponse", "shipment", 0, "package", 0, default={})
        events = []
        for ev in package.get("activity") or []:
            day, clock = _ups_date(ev.get("date")), _ups_time(ev.get("time"))
            events.append(
                make_event(
                    timestamp=f"{day}T{clock}" if (day and clock) else day,
                    location=join_location(
                        dig(ev, "location", "address", "city"),
                        dig(ev, "location", "address", "countryCode"),
                    ),
                    status_code=dig(ev, "status", "type"),
                    description=dig(ev, "status", "description"),
                    provider=provider.name,
                )
            )
        return make_result(
            identifier,
            provider,
            status=dig(package, "currentStatus", "description"),
            current_location=dig(package, "currentStatus", "location"),
            estimated_completion=_ups_date(package.get("deliveryDate")) or None,
            events=events,
            raw=data,
        )


class DHLAdapter(CarrierAdapter):
    """DHL Shipment Tracking - Unified (DHL-API-Key 헤더, 쿼리스트링 조회)"""

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": provider.endpoint,
            "params": {"trackingNumber": identifier},
            "headers": {
                "DHL-API-Key": provider.credential,
                "Content-Type": "application/json",
            },
        }

    @staticmethod
    def _location(value: Any) -> Any:
        # location 이 문자열로 오거나 {"address": {"addressLocality": ...}} 로 온다
        if isinstance(value, dict):
            return dig(value, "address", "addressLocality")
        return value

    def parse(self, identifier, data, provider):
        shipment = dig(data, "shipments", 0, default={})
        raw_events = shipment.get("events") or []
        events = [
            make_event(
                timestamp=ev.get("timestamp"),
                location=self._location(ev.get("location")),
                status_code=ev.get("statusCode"),
                description=ev.get("description"),
                provider=provider.name,
            )
            for ev in raw_events
        ]
        return make_result(
            identifier,
            provider,
            status=dig(shipment, "status", "description"),
            current_location=self._location(dig(raw_events, 0, "location")),
            estimated_completion=shipment.get("estimatedTimeOfDelivery"),
            events=events,
            raw=data,
        )
