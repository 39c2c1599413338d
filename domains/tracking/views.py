# domains/tracking/views.py
import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .exceptions import UnknownProviderHint
from .serializers import (
    ProviderStatusSerializer,
    TrackingHistorySerializer,
    TrackingResultSerializer,
    TrackQuerySerializer,
    UnifiedQuerySerializer,
)
from .services import get_tracking_service

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------
# GET /api/v1/tracking/track/?identifier=...&provider=...
# 항상 정규화된 결과를 반환 (폴백 포함). 모르는 provider 만 400.
# --------------------------------------------------------------------
class TrackShipmentAPI(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter(name="identifier", required=True, type=str,
                             description="container / booking / AWB / parcel number"),
            OpenApiParameter(name="provider", required=False, type=str,
                             description="explicit provider name (skips auto-detection)"),
            OpenApiParameter(name="reference_type", required=False, type=str,
                             enum=["container", "booking"],
                             description="booking: track a booking number via the container platform"),
            OpenApiParameter(name="scac_code", required=False, type=str),
            OpenApiParameter(name="flight_date", required=False, type=str,
                             description="YYYY-MM-DD, flight lookups only"),
        ],
        responses={200: TrackingResultSerializer},
    )
    def get(self, request):
        ser = TrackQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)

        data = ser.validated_data
        try:
            result = get_tracking_service().track_shipment(
                data["identifier"],
                provider_hint=data["provider"],
                reference_type=data.get("reference_type"),
                scac_code=data.get("scac_code"),
                flight_date=data.get("flight_date"),
            )
        except UnknownProviderHint as e:
            logger.info("Rejected provider hint: %s", e)
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TrackingResultSerializer(result).data, status=status.HTTP_200_OK)


# --------------------------------------------------------------------
# GET /api/v1/tracking/unified/?identifier=...&modality=auto|aviation|maritime|ground
# --------------------------------------------------------------------
class UnifiedTrackAPI(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter(name="identifier", required=True, type=str),
            OpenApiParameter(name="modality", required=False, type=str,
                             enum=["auto", "aviation", "maritime", "ground"]),
            OpenApiParameter(name="flight_date", required=False, type=str,
                             description="YYYY-MM-DD, flight lookups only"),
        ],
        responses={200: TrackingResultSerializer},
    )
    def get(self, request):
        ser = UnifiedQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)

        result = get_tracking_service().track_unified(
            ser.validated_data["identifier"],
            ser.validated_data["modality"],
            flight_date=ser.validated_data.get("flight_date"),
        )
        return Response(TrackingResultSerializer(result).data, status=status.HTTP_200_OK)


# --------------------------------------------------------------------
# GET /api/v1/tracking/history/{tracking_number}/  (수신 순서)
# --------------------------------------------------------------------
class TrackingHistoryAPI(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(responses={200: TrackingHistorySerializer})
    def get(self, request, tracking_number: str):
        events = get_tracking_service().history(tracking_number)
        data = TrackingHistorySerializer(
            {"tracking_number": tracking_number, "events": events}
        ).data
        return Response(data, status=status.HTTP_200_OK)


# --------------------------------------------------------------------
# GET /api/v1/tracking/providers/  (API 키 설정 여부)
# --------------------------------------------------------------------
class ProviderStatusAPI(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(responses={200: ProviderStatusSerializer(many=True)})
    def get(self, request):
        rows = get_tracking_service().provider_status()
        return Response(ProviderStatusSerializer(rows, many=True).data, status=status.HTTP_200_OK)
