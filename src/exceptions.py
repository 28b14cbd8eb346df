"""파이프라인 공통 예외

- InvalidPayloadError: 입력 검증 실패. 재시도 없이 즉시 실패 처리.
- CapabilityError: 외부 서비스(탐지/번역/스토리지/메시징) 실패. 플랫폼 재시도 대상.
"""


class PipelineError(Exception):
    pass


class InvalidPayloadError(PipelineError):
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class CapabilityError(PipelineError):
    pass


class StageFailedError(PipelineError):
    """Celery 재시도를 트리거하기 위해 task 어댑터가 발생시키는 예외"""
