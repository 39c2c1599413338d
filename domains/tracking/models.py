from __future__ import annotations

from django.db import models

from .exceptions import AppendOnlyViolation
from .results import TrackingEvent


class TrackingEventRecord(models.Model):
    """
    트래킹 이벤트 이력(추가 전용).
    정렬 기준은 수신 순서(received_at, id)이며 업스트림 event_time 이 아니다.
    """

    id = models.BigAutoField(primary_key=True)
    tracking_number = models.CharField(max_length=128)
    provider = models.CharField(max_length=40)

    status = models.CharField(max_length=80, blank=True)
    location = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    event_time = models.DateTimeField()

    raw_payload = models.JSONField(null=True, blank=True)
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("received_at", "id")
        indexes = [
            models.Index(
                fields=["tracking_number", "received_at"],
                name="tracking_tr_trackin_5c21e0_idx",
            ),
            models.Index(
                fields=["provider", "event_time"],
                name="tracking_tr_provide_9a4f13_idx",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyViolation("Tracking events are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyViolation("Tracking events are append-only")

    def to_event(self) -> TrackingEvent:
        return TrackingEvent(
            timestamp=self.event_time,
            location=self.location,
            status_code=self.status,
            description=self.description,
        )

    def __str__(self) -> str:
        return f"{self.provider}:{self.tracking_number}@{self.event_time}"
