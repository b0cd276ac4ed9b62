# app/core/exceptions.py


class BodyTrackerError(Exception):
    """
    애플리케이션 도메인 예외의 최상위 클래스.

    라우트 계층은 이 예외 계열만 HTTP 응답으로 변환하며,
    그 외의 예외는 전역 에러 핸들러(500)로 전달됩니다.
    """


class NotFound(BodyTrackerError):
    """
    대상 리소스(사진, 비교 결과, 히스토리)가 없거나 요청자가 소유하지 않은 경우.

    존재 여부와 소유권 위반을 구분하지 않습니다.
    """


class UpstreamUnavailable(BodyTrackerError):
    """외부 AI 모델 호출이 네트워크 오류, 타임아웃, 5xx 응답으로 실패한 경우 (재시도 대상)."""


class UpstreamRejected(BodyTrackerError):
    """외부 AI 모델이 할당량, 인증, 정책 위반 등으로 요청을 거부한 경우 (재시도하지 않음)."""


class ExtractionFailed(BodyTrackerError):
    """모델 응답 텍스트를 구조화된 문서(JSON 객체)로 복원하지 못한 경우."""


class ImageFetchFailed(BodyTrackerError):
    """분석 대상 이미지를 스토리지에서 내려받지 못한 경우."""


class ResultPersistError(BodyTrackerError):
    """분석 결과를 대상 레코드(사진/비교 쌍)에 저장하지 못한 경우."""


class DuplicateEmailError(BodyTrackerError):
    """이미 가입된 이메일로 회원가입을 시도한 경우."""


class InvalidCredentialsError(BodyTrackerError):
    """이메일 또는 비밀번호가 일치하지 않는 경우."""
