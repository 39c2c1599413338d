from __future__ import annotations

import json

from django.contrib import admin
from django.utils.html import format_html

from . import models


# ---------- TrackingEventRecord Admin (읽기 전용) ----------
@admin.register(models.TrackingEventRecord)
class TrackingEventRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "tracking_number", "provider", "status", "location", "event_time", "received_at")
    readonly_fields = (
        "tracking_number",
        "provider",
        "status",
        "location",
        "description",
        "event_time",
        "received_at",
        "raw_payload_display",
    )
    exclude = ("raw_payload",)
    search_fields = ("tracking_number", "description")
    ordering = ("-received_at", "-id")

    class ProviderFilter(admin.SimpleListFilter):
        title = "Provider"
        parameter_name = "provider"

        def lookups(self, request, model_admin):
            qs = (
                models.TrackingEventRecord.objects
                .order_by()
                .values_list("provider", flat=True)
                .distinct()[:50]
            )
            return [(v, v) for v in qs if v]

        def queryset(self, request, queryset):
            if self.value():
                return queryset.filter(provider=self.value())
            return queryset

    list_filter = (ProviderFilter,)

    # 이력은 추가 전용: 관리자 화면에서도 생성/수정/삭제 불가
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def raw_payload_display(self, obj):
        if obj.raw_payload is None:
            return "-"
        pretty = json.dumps(obj.raw_payload, ensure_ascii=False, indent=2)
        return format_html("<pre style='white-space:pre-wrap'>{}</pre>", pretty)
    raw_payload_display.short_description = "Raw payload"
