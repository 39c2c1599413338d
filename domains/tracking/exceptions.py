from __future__ import annotations


class TrackingError(Exception):
    """트래킹 도메인 공통 예외. provider 이름과 상세 메시지를 함께 보관."""

    def __init__(self, detail: str = "", *, provider: str = ""):
        self.detail = detail
        self.provider = provider
        super().__init__(detail)


class ProviderUnavailable(TrackingError):
    """해당 제공자의 API 키(credential)가 설정되지 않았을 때"""

    pass


class UpstreamError(TrackingError):
    """원격 호출 실패: 비정상 상태코드, 타임아웃, 깨진 payload, 잘못된 시각 등"""

    pass


class UnknownProviderHint(TrackingError):
    """호출부가 존재하지 않는 제공자 이름을 명시했을 때 (호출부로 전파되는 유일한 예외)"""

    pass


class ClassificationFailed(TrackingError):
    """식별자 형태로 제공자를 추정하지 못했을 때 (내부 신호, 폴백으로 처리)"""

    pass


class AppendOnlyViolation(TrackingError):
    """이벤트 저장소는 추가만 허용 (수정/삭제 시도)"""

    pass
