from __future__ import annotations

from rest_framework import serializers

from .registry import MODALITIES
from .results import REFERENCE_TYPES
from .unified import MODALITY_AUTO


# ---------------------------
# 출력용
# ---------------------------
class TrackingEventSerializer(serializers.Serializer):
    timestamp = serializers.DateTimeField()
    location = serializers.CharField()
    status_code = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)


class TrackingResultSerializer(serializers.Serializer):
    tracking_number = serializers.CharField()
    status = serializers.CharField()
    current_location = serializers.CharField()
    observed_at = serializers.DateTimeField()
    estimated_completion = serializers.DateTimeField(allow_null=True)
    events = TrackingEventSerializer(many=True)
    provider = serializers.CharField()
    raw = serializers.JSONField(allow_null=True)
    degraded = serializers.BooleanField()
    reason = serializers.CharField(allow_blank=True)


class TrackingHistorySerializer(serializers.Serializer):
    tracking_number = serializers.CharField()
    events = TrackingEventSerializer(many=True)


class ProviderStatusSerializer(serializers.Serializer):
    name = serializers.CharField()
    modality = serializers.CharField()
    category = serializers.CharField()
    configured = serializers.BooleanField()
    auto_detect = serializers.BooleanField()


# ---------------------------
# 입력용 (쿼리스트링)
# provider / carrier 둘 다 받되 provider 로 정규화
# ---------------------------
class TrackQuerySerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=128)
    provider = serializers.CharField(required=False, allow_blank=True)
    carrier = serializers.CharField(required=False, allow_blank=True)
    # 예약번호 조회: reference_type=booking (+ 선사 SCAC 코드)
    reference_type = serializers.ChoiceField(choices=REFERENCE_TYPES, required=False)
    scac_code = serializers.CharField(required=False, allow_blank=True, max_length=8)
    flight_date = serializers.DateField(required=False)

    def validate(self, attrs):
        attrs["provider"] = attrs.get("provider") or attrs.get("carrier") or None
        attrs.pop("carrier", None)
        return attrs


class UnifiedQuerySerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=128)
    modality = serializers.ChoiceField(
        choices=(MODALITY_AUTO,) + MODALITIES,
        required=False,
        default=MODALITY_AUTO,
    )
    flight_date = serializers.DateField(required=False)
