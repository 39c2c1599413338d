from django.contrib import admin
from django.urls import path, include, re_path
from django.views.generic import RedirectView
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView


def healthz(_):
    return JsonResponse({"ok": True})


urlpatterns = [
    # Admin (추적 이벤트 이력 조회용, 읽기 전용)
    path("admin/", admin.site.urls),

    # OpenAPI / Swagger
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/",   SpectacularSwaggerView.as_view(url_name="v1-schema"), name="docs"),

    # 슬래시 없는 접근 → 슬래시 있는 경로로 301 정규화
    re_path(r"^api/schema$", RedirectView.as_view(url="/api/schema/", permanent=True)),
    re_path(r"^api/docs$",   RedirectView.as_view(url="/api/docs/",   permanent=True)),

    # API v1 엔드포인트
    path("api/v1/", include("api.v1.urls")),

    # 루트 → 문서
    path("", RedirectView.as_view(url="/api/docs/", permanent=False)),

    # 헬스체크
    path("healthz/", healthz),
]
