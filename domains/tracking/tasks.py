# domains/tracking/tasks.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(acks_late=True, max_retries=0, name="domains.tracking.tasks.track_identifier")
def track_identifier(
    identifier: str,
    provider_hint: Optional[str] = None,
    modality_hint: Optional[str] = None,
    **options: Any,
) -> Optional[Dict[str, Any]]:
    """
    백그라운드 단건 조회 (재시도 없음).
    options: reference_type / scac_code / flight_date("YYYY-MM-DD")
    반환: 직렬화된 결과 dict, 잘못된 힌트면 None
    """
    # 지연 임포트로 앱 로딩 순서 문제 회피
    from .exceptions import UnknownProviderHint
    from .serializers import TrackingResultSerializer
    from .services import get_tracking_service

    service = get_tracking_service()
    try:
        if modality_hint:
            result = service.track_unified(identifier, modality_hint, **options)
        else:
            result = service.track_shipment(identifier, provider_hint=provider_hint, **options)
    except (UnknownProviderHint, ValueError, TypeError) as e:
        logger.warning("Tracking task rejected %r: %s", identifier, e)
        return None

    return dict(TrackingResultSerializer(result).data)
