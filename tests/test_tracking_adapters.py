# tests/test_tracking_adapters.py
"""
제공자 어댑터 단위 테스트 (네트워크는 requests.request 패치로 대체)
"""
from datetime import date, datetime, timezone as dt_timezone

import pytest
import requests

from domains.tracking.adapters import (
    AviationStackAdapter,
    CoscoAdapter,
    DHLAdapter,
    FedExAdapter,
    MaerskAdapter,
    MarineTrafficAdapter,
    MSCAdapter,
    UPSAdapter,
    VizionAdapter,
)
from domains.tracking.adapters.base import dig, parse_timestamp
from domains.tracking.adapters.vizion import determine_status
from domains.tracking.exceptions import ProviderUnavailable, UpstreamError
from domains.tracking.results import TrackingEvent

UTC = dt_timezone.utc

MAERSK_PAYLOAD = {
    "trackingEvents": [
        {
            "eventDateTime": "2024-03-01T08:00:00Z",
            "eventLocation": "Rotterdam",
            "eventType": "GATE_IN",
            "eventDescription": "Gate in at terminal",
        },
        {
            "eventDateTime": "2024-03-03T12:00:00Z",
            "eventLocation": "Singapore",
            "eventType": "LOAD",
            "eventDescription": "Loaded on vessel",
        },
    ],
    "transportPlan": {"transportPlanStages": [{"transportMode": "VESSEL"}]},
    "shipmentJourney": {"currentLocation": "Singapore"},
    "estimatedTimeOfArrival": "2024-03-20T00:00:00Z",
}


# ─────────────────────────────────────────────────────────────
# 공통 흐름 (CarrierAdapter)
# ─────────────────────────────────────────────────────────────
class TestCarrierAdapterFlow:
    def test_unconfigured_provider_raises_without_network(self, keyless_registry, http):
        with pytest.raises(ProviderUnavailable) as exc:
            MaerskAdapter().track("MAEU1234567", keyless_registry.get("Maersk"))
        assert exc.value.provider == "Maersk"
        http.assert_not_called()

    def test_request_uses_configured_timeout_and_accept_header(self, registry, http, fake_response):
        http.return_value = fake_response(200, MAERSK_PAYLOAD)

        MaerskAdapter().track("MAEU1234567", registry.get("Maersk"))

        assert http.call_count == 1
        args, kwargs = http.call_args
        assert args == ("GET", "https://api.maersk.com/track/v1/tracking/MAEU1234567")
        assert kwargs["timeout"] == 3.0
        assert kwargs["headers"]["Accept"] == "application/json"
        assert kwargs["headers"]["Authorization"] == "Bearer test-maersk-key"

    @pytest.mark.parametrize("code", [400, 401, 404, 500, 503])
    def test_non_2xx_is_upstream_error(self, registry, http, fake_response, code):
        http.return_value = fake_response(code)
        with pytest.raises(UpstreamError) as exc:
            MaerskAdapter().track("MAEU1234567", registry.get("Maersk"))
        assert str(code) in str(exc.value)

    def test_timeout_is_upstream_error(self, registry, http):
        http.side_effect = requests.Timeout("read timed out")
        with pytest.raises(UpstreamError) as exc:
            CoscoAdapter().track("COSU1234567890", registry.get("COSCO"))
        assert "timeout" in str(exc.value)

    def test_connection_error_is_upstream_error(self, registry, http):
        http.side_effect = requests.ConnectionError("refused")
        with pytest.raises(UpstreamError):
            DHLAdapter().track("1234567890", registry.get("DHL"))

    def test_invalid_json_is_upstream_error(self, registry, http, fake_response):
        http.return_value = fake_response(200, json_error=True)
        with pytest.raises(UpstreamError) as exc:
            MSCAdapter().track("MEDU123456", registry.get("MSC"))
        assert "JSON" in str(exc.value)

    def test_malformed_timestamp_is_upstream_error(self, registry, http, fake_response):
        payload = {
            "trackingEvents": [
                {"eventDateTime": "yesterday-ish", "eventLocation": "X", "eventType": "LOAD"}
            ]
        }
        http.return_value = fake_response(200, payload)
        with pytest.raises(UpstreamError) as exc:
            MaerskAdapter().track("MAEU1234567", registry.get("Maersk"))
        assert "timestamp" in str(exc.value)

    def test_unexpected_payload_shape_is_upstream_error(self, registry, http, fake_response):
        # dict 를 기대하는데 list 가 오면 매핑 실패 → UpstreamError 로 감싼다
        http.return_value = fake_response(200, ["unexpected"])
        with pytest.raises(UpstreamError) as exc:
            MaerskAdapter().track("MAEU1234567", registry.get("Maersk"))
        assert "Malformed" in str(exc.value)


# ─────────────────────────────────────────────────────────────
# 해양 선사
# ─────────────────────────────────────────────────────────────
def test_maersk_mapping(registry, http, fake_response):
    http.return_value = fake_response(200, MAERSK_PAYLOAD)

    result = MaerskAdapter().track("MAEU1234567", registry.get("Maersk"))

    assert result.provider == "Maersk"
    assert result.tracking_number == "MAEU1234567"
    assert result.status == "VESSEL"
    assert result.current_location == "Singapore"
    assert result.estimated_completion == datetime(2024, 3, 20, tzinfo=UTC)
    assert result.degraded is False
    assert result.reason == ""
    assert result.raw == MAERSK_PAYLOAD
    assert result.observed_at.tzinfo is not None
    # 제공자 순서 유지
    assert [e.status_code for e in result.events] == ["GATE_IN", "LOAD"]
    assert result.events[0] == TrackingEvent(
        timestamp=datetime(2024, 3, 1, 8, 0, tzinfo=UTC),
        location="Rotterdam",
        status_code="GATE_IN",
        description="Gate in at terminal",
    )


def test_maersk_missing_fields_use_sentinels(registry, http, fake_response):
    payload = {"trackingEvents": [{"eventDateTime": "2024-03-01T08:00:00Z", "eventType": "GATE_IN"}]}
    http.return_value = fake_response(200, payload)

    result = MaerskAdapter().track("MAEU1234567", registry.get("Maersk"))

    assert result.status == "In transit"
    assert result.current_location == "Unknown location"
    assert result.estimated_completion is None
    ev = result.events[0]
    assert ev.location == "Unspecified"
    # 설명이 없으면 상태 코드로 채움
    assert ev.description == "GATE_IN"


def test_cosco_mapping(registry, http, fake_response):
    payload = {
        "status": "Discharged",
        "currentLocation": "Los Angeles",
        "eta": "2024-04-10",
        "events": [
            {"date": "2024-04-01T06:00:00", "location": "Shanghai", "status": "LOAD", "description": "Loaded"},
            {"date": "2024-04-09T18:30:00", "location": "Los Angeles", "status": "DISC", "description": "Discharged"},
        ],
    }
    http.return_value = fake_response(200, payload)

    result = CoscoAdapter().track("COSU1234567890", registry.get("COSCO"))

    args, kwargs = http.call_args
    assert args[1] == "https://api.cosco-shipping.com/tracking/v1/COSU1234567890"
    assert kwargs["headers"]["X-API-Key"] == "test-cosco-key"
    assert result.status == "Discharged"
    assert result.current_location == "Los Angeles"
    # naive 시각은 UTC 로 간주, 날짜만 있으면 자정
    assert result.events[0].timestamp == datetime(2024, 4, 1, 6, 0, tzinfo=UTC)
    assert result.estimated_completion == datetime(2024, 4, 10, tzinfo=UTC)
    assert len(result.events) == 2


def test_msc_mapping(registry, http, fake_response):
    payload = {
        "currentStatus": "Empty returned",
        "currentLocation": "Antwerp",
        "trackingHistory": [
            {"eventDate": "2024-02-01T00:00:00Z", "location": "Antwerp", "eventType": "EMPTY_RETURN"},
        ],
    }
    http.return_value = fake_response(200, payload)

    result = MSCAdapter().track("MEDU123456", registry.get("MSC"))

    assert http.call_args.kwargs["headers"]["Authorization"] == "Bearer test-msc-key"
    assert result.provider == "MSC"
    assert result.status == "Empty returned"
    assert result.events[0].status_code == "EMPTY_RETURN"
    assert result.estimated_completion is None


# ─────────────────────────────────────────────────────────────
# 택배사
# ─────────────────────────────────────────────────────────────
def test_fedex_posts_body_and_maps_scan_events(registry, http, fake_response):
    payload = {
        "output": {
            "completeTrackResults": [
                {
                    "trackResults": [
                        {
                            "scanEvents": [
                                {
                                    "date": "2024-05-01T10:00:00-05:00",
                                    "scanLocation": {"city": "MEMPHIS", "countryCode": "US"},
                                    "eventType": "PU",
                                    "eventDescription": "Picked up",
                                }
                            ],
                            "latestStatusDetail": {
                                "description": "In transit",
                                "scanLocation": {"city": "MEMPHIS"},
                            },
                            "estimatedDeliveryTimeWindow": {
                                "window": {"begins": "2024-05-03T00:00:00Z"}
                            },
                        }
                    ]
                }
            ]
        }
    }
    http.return_value = fake_response(200, payload)

    result = FedExAdapter().track("123456789012", registry.get("FedEx"))

    args, kwargs = http.call_args
    assert args == ("POST", "https://api.fedex.com/track/v1/trackingnumbers")
    assert kwargs["json"]["trackingInfo"][0]["trackingNumberInfo"]["trackingNumber"] == "123456789012"
    assert result.current_location == "MEMPHIS"
    assert result.events[0].location == "MEMPHIS, US"
    assert result.events[0].timestamp == datetime(2024, 5, 1, 15, 0, tzinfo=UTC)
    assert result.estimated_completion == datetime(2024, 5, 3, tzinfo=UTC)


def test_fedex_empty_output_gives_sentinel_result(registry, http, fake_response):
    http.return_value = fake_response(200, {"output": {}})

    result = FedExAdapter().track("123456789012", registry.get("FedEx"))

    assert result.events == []
    assert result.status == "In transit"
    assert result.current_location == "Unknown location"


def test_ups_compact_dates(registry, http, fake_response):
    payload = {
        "trackResponse": {
            "shipment": [
                {
                    "package": [
                        {
                            "activity": [
                                {
                                    "date": "20240501",
                                    "time": "143000",
                                    "location": {"address": {"city": "LOUISVILLE", "countryCode": "US"}},
                                    "status": {"type": "I", "description": "Arrived at Facility"},
                                }
                            ],
                            "currentStatus": {"description": "In Transit", "location": "LOUISVILLE"},
                            "deliveryDate": [{"type": "SDD", "date": "20240503"}],
                        }
                    ]
                }
            ]
        }
    }
    http.return_value = fake_response(200, payload)

    result = UPSAdapter().track("1Z999AA10123456784", registry.get("UPS"))

    assert http.call_args.args[1] == "https://onlinetools.ups.com/track/v1/details/1Z999AA10123456784"
    ev = result.events[0]
    assert ev.timestamp == datetime(2024, 5, 1, 14, 30, tzinfo=UTC)
    assert ev.location == "LOUISVILLE, US"
    assert ev.status_code == "I"
    assert ev.description == "Arrived at Facility"
    assert result.status == "In Transit"
    assert result.estimated_completion == datetime(2024, 5, 3, tzinfo=UTC)


def test_dhl_query_param_and_location_shapes(registry, http, fake_response):
    payload = {
        "shipments": [
            {
                "status": {"description": "Delivered"},
                "events": [
                    {
                        "timestamp": "2024-05-02T09:00:00Z",
                        "location": {"address": {"addressLocality": "Leipzig"}},
                        "statusCode": "delivered",
                        "description": "Delivered",
                    },
                    {
                        "timestamp": "2024-05-01T09:00:00Z",
                        "location": "Hong Kong",
                        "statusCode": "transit",
                        "description": "Processed at hub",
                    },
                ],
            }
        ]
    }
    http.return_value = fake_response(200, payload)

    result = DHLAdapter().track("1234567890", registry.get("DHL"))

    kwargs = http.call_args.kwargs
    assert kwargs["params"] == {"trackingNumber": "1234567890"}
    assert kwargs["headers"]["DHL-API-Key"] == "test-dhl-key"
    assert result.status == "Delivered"
    assert result.current_location == "Leipzig"
    assert [e.location for e in result.events] == ["Leipzig", "Hong Kong"]


# ─────────────────────────────────────────────────────────────
# 컨테이너 통합(Vizion)
# ─────────────────────────────────────────────────────────────
def test_vizion_posts_container_number(registry, http, fake_response):
    payload = {
        "locations": [
            {
                "timestamp": "2024-03-01T00:00:00Z",
                "location": {"name": "Shanghai", "country": "CN"},
                "event": "Vessel Departure",
                "description": "Departed",
            }
        ],
        "estimated_arrival": "2024-03-25T00:00:00Z",
    }
    http.return_value = fake_response(200, payload)

    result = VizionAdapter().track("MAEU1234567", registry.get("Vizion"))

    args, kwargs = http.call_args
    assert args == ("POST", "https://api.vizionapi.com/v1/track")
    assert kwargs["json"] == {"container_number": "MAEU1234567", "scac_code": None}
    assert result.provider == "Vizion"
    assert result.status == "In Transit"
    assert result.current_location == "Shanghai, CN"


@pytest.mark.parametrize(
    "last_event, expected",
    [
        ("Container Discharged", "Delivered"),
        ("Vessel Departure", "In Transit"),
        ("Berthing", "At Port"),
        ("Loaded on board", "Loading"),
        ("Customs hold", "In Transit"),
    ],
)
def test_vizion_status_from_last_event(last_event, expected):
    ev = TrackingEvent(
        timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        location="X",
        status_code=last_event,
        description="",
    )
    assert determine_status([ev]) == expected


def test_vizion_status_without_events():
    assert determine_status([]) == "Unknown"


# ─────────────────────────────────────────────────────────────
# 항공 / 선박
# ─────────────────────────────────────────────────────────────
def test_aviationstack_flight(registry, http, fake_response):
    payload = {
        "data": [
            {
                "flight_status": "active",
                "departure": {
                    "airport": "Incheon International",
                    "iata": "ICN",
                    "scheduled": "2024-06-01T10:00:00+00:00",
                    "actual": "2024-06-01T10:15:00+00:00",
                },
                "arrival": {
                    "airport": "Los Angeles International",
                    "iata": "LAX",
                    "scheduled": "2024-06-01T21:00:00+00:00",
                    "estimated": "2024-06-01T20:50:00+00:00",
                },
            }
        ]
    }
    http.return_value = fake_response(200, payload)

    result = AviationStackAdapter().track("KE017", registry.get("AviationStack"))

    args, kwargs = http.call_args
    assert args[1] == "http://api.aviationstack.com/v1/flights"
    assert kwargs["params"] == {
        "access_key": "test-aviationstack-key",
        "flight_iata": "KE017",
        "limit": 1,
    }
    assert result.status == "active"
    assert result.current_location == "Incheon International (ICN)"
    assert result.estimated_completion == datetime(2024, 6, 1, 20, 50, tzinfo=UTC)
    assert [e.status_code for e in result.events] == ["departed"]


def test_aviationstack_landed_flight_has_arrival_event(registry, http, fake_response):
    payload = {
        "data": [
            {
                "flight_status": "landed",
                "departure": {"iata": "ICN", "actual": "2024-06-01T10:15:00+00:00"},
                "arrival": {"iata": "LAX", "actual": "2024-06-01T20:40:00+00:00"},
            }
        ]
    }
    http.return_value = fake_response(200, payload)

    result = AviationStackAdapter().track("KE017", registry.get("AviationStack"))

    assert [e.status_code for e in result.events] == ["departed", "landed"]
    assert result.current_location == "LAX"


def test_aviationstack_unknown_flight(registry, http, fake_response):
    http.return_value = fake_response(200, {"data": []})
    with pytest.raises(UpstreamError) as exc:
        AviationStackAdapter().track("KE017", registry.get("AviationStack"))
    assert "not found" in str(exc.value)


def test_marinetraffic_position(registry, http, fake_response):
    payload = [
        {
            "MMSI": "123456789",
            "LAT": "35.1",
            "LON": "129.04",
            "SHIPNAME": "HMM ALGECIRAS",
            "STATUS": "Under way using engine",
            "TIMESTAMP": "2024-06-01T12:00:00",
            "DESTINATION": "BUSAN",
            "ETA": "2024-06-03T08:00:00",
        }
    ]
    http.return_value = fake_response(200, payload)

    result = MarineTrafficAdapter().track("123456789", registry.get("MarineTraffic"))

    args, kwargs = http.call_args
    assert args[1] == "https://services.marinetraffic.com/api/exportvessel/test-marinetraffic-key"
    assert kwargs["params"]["mmsi"] == "123456789"
    assert result.current_location == "35.1, 129.04"
    assert result.status == "Under way using engine"
    assert result.events[0].description == "HMM ALGECIRAS position report (destination BUSAN)"
    assert result.estimated_completion == datetime(2024, 6, 3, 8, 0, tzinfo=UTC)


def test_marinetraffic_empty_data(registry, http, fake_response):
    http.return_value = fake_response(200, {"data": []})
    with pytest.raises(UpstreamError):
        MarineTrafficAdapter().track("123456789", registry.get("MarineTraffic"))


# ─────────────────────────────────────────────────────────────
# 헬퍼
# ─────────────────────────────────────────────────────────────
def test_dig_handles_missing_paths():
    data = {"a": [{"b": {"c": 1}}]}
    assert dig(data, "a", 0, "b", "c") == 1
    assert dig(data, "a", 5, "b", default="x") == "x"
    assert dig(data, "a", "b") is None
    assert dig(None, "a", default={}) == {}


@pytest.mark.parametrize("value", [None, "", "   ", "2024-13-45", "not a date"])
def test_parse_timestamp_rejects_bad_values(value):
    with pytest.raises(UpstreamError):
        parse_timestamp(value, provider="Test")


def test_parse_timestamp_keeps_offset():
    dt = parse_timestamp("2024-01-01T09:00:00+09:00")
    assert dt == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)


# ─────────────────────────────────────────────────────────────
# 조회 옵션 / URL 경로 이스케이프
# ─────────────────────────────────────────────────────────────
def test_vizion_booking_reference_posts_booking_number(registry, http, fake_response):
    http.return_value = fake_response(200, {"locations": []})

    VizionAdapter().track(
        "BKG7788990", registry.get("Vizion"), reference_type="booking", scac_code="MAEU"
    )

    assert http.call_args.kwargs["json"] == {"booking_number": "BKG7788990", "scac_code": "MAEU"}


def test_vizion_container_reference_keeps_optional_scac(registry, http, fake_response):
    http.return_value = fake_response(200, {"locations": []})

    VizionAdapter().track("MSCU1234567", registry.get("Vizion"), scac_code="MSCU")

    assert http.call_args.kwargs["json"] == {"container_number": "MSCU1234567", "scac_code": "MSCU"}


def test_only_vizion_supports_booking_lookups():
    assert VizionAdapter.supports_booking is True
    assert MaerskAdapter.supports_booking is False


@pytest.mark.parametrize("flight_date", ["2024-06-01", date(2024, 6, 1)])
def test_aviationstack_flight_date_param(registry, http, fake_response, flight_date):
    http.return_value = fake_response(200, {"data": []})

    with pytest.raises(UpstreamError):
        AviationStackAdapter().track("KE017", registry.get("AviationStack"), flight_date=flight_date)

    assert http.call_args.kwargs["params"]["flight_date"] == "2024-06-01"


def test_unknown_options_are_ignored(registry, http, fake_response):
    http.return_value = fake_response(200, MAERSK_PAYLOAD)

    result = MaerskAdapter().track("MAEU1234567", registry.get("Maersk"), flight_date="2024-06-01")

    assert result.provider == "Maersk"
    assert "params" not in http.call_args.kwargs or not http.call_args.kwargs["params"]


@pytest.mark.parametrize(
    "adapter_cls, name, endpoint",
    [
        (MaerskAdapter, "Maersk", "https://api.maersk.com/track/v1/tracking"),
        (CoscoAdapter, "COSCO", "https://api.cosco-shipping.com/tracking/v1"),
        (MSCAdapter, "MSC", "https://api.msc.com/tracking/v1"),
        (UPSAdapter, "UPS", "https://onlinetools.ups.com/track/v1/details"),
    ],
)
def test_identifier_is_escaped_in_url_path(registry, http, fake_response, adapter_cls, name, endpoint):
    http.return_value = fake_response(200, {})

    adapter_cls().track("A/B?X=1#Z", registry.get(name))

    assert http.call_args.args[1] == f"{endpoint}/A%2FB%3FX%3D1%23Z"
