from django.apps import AppConfig
from django.conf import settings


class TrackingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "domains.tracking"
    label = "tracking"

    registry = None

    def ready(self):
        # 제공자 레지스트리는 프로세스당 한 번만 구성
        from .registry import build_default_registry

        self.registry = build_default_registry(getattr(settings, "TRACKING", {}))
