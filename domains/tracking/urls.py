from django.urls import path

from .views import (
    ProviderStatusAPI,
    TrackingHistoryAPI,
    TrackShipmentAPI,
    UnifiedTrackAPI,
)

app_name = "tracking"

urlpatterns = [
    path("track/", TrackShipmentAPI.as_view(), name="tracking-track"),
    path("unified/", UnifiedTrackAPI.as_view(), name="tracking-unified"),
    path("providers/", ProviderStatusAPI.as_view(), name="tracking-providers"),
    path(
        "history/<str:tracking_number>/",
        TrackingHistoryAPI.as_view(),
        name="tracking-history",
    ),
]
