# domains/tracking/adapters/maritime.py
from __future__ import annotations

from typing import Any, Dict

from ..exceptions import UpstreamError
from ..results import UNKNOWN_LOCATION
from .base import CarrierAdapter, make_event, make_result


class MarineTrafficAdapter(CarrierAdapter):
    """
    MarineTraffic 선박 위치(MMSI). API 키는 URL 경로에 들어간다.
    응답은 jsono 프로토콜: 리스트 혹은 {"data": [...]}.
    """

    def build_request(self, identifier, provider, **options) -> Dict[str, Any]:
        return {
            "url": f"{provider.endpoint}/exportvessel/{provider.credential}",
            "params": {
                "v": "8",
                "protocol": "jsono",
                "msgtype": "extended",
                "mmsi": identifier,
            },
        }

    def parse(self, identifier, data, provider):
        records = data.get("data") if isinstance(data, dict) else data
        if not records:
            raise UpstreamError(f"Vessel {identifier} not found", provider=provider.name)
        vessel: Dict[str, Any] = records[0]

        lat, lon = vessel.get("LAT"), vessel.get("LON")
        position = f"{lat}, {lon}" if lat not in (None, "") and lon not in (None, "") else UNKNOWN_LOCATION
        name = vessel.get("SHIPNAME") or f"MMSI {identifier}"

        description = f"{name} position report"
        if vessel.get("DESTINATION"):
            description += f" (destination {vessel['DESTINATION']})"

        events = [
            make_event(
                timestamp=vessel.get("TIMESTAMP"),
                location=position,
                status_code="position_report",
                description=description,
                provider=provider.name,
            )
        ]
        return make_result(
            identifier,
            provider,
            status=vessel.get("STATUS"),
            current_location=position,
            estimated_completion=vessel.get("ETA"),
            events=events,
            raw=data,
        )
