"""파이프라인 단계 Celery task

각 task는 단계 핸들러를 실행하고 StageResult를 Celery 완료 신호로 변환한다.
- 성공: 결과 dict 반환
- 입력 오류: Reject (재시도/재전달 없음)
- 외부 서비스 오류: StageFailedError → autoretry (지수 백오프)
"""

import logging
from typing import Any

from celery.exceptions import Reject, SoftTimeLimitExceeded
from celery.signals import worker_process_init

from src.config import get_settings
from src.constants import TaskName
from src.exceptions import StageFailedError
from src.infra.celery_app import celery_app
from src.schemas.pipeline import StageResult
from src.services import ingestion, save, translate
from src.services.capabilities import get_capabilities

logger = logging.getLogger(__name__)

settings = get_settings()

RETRY_OPTIONS: dict[str, Any] = {
    "autoretry_for": (StageFailedError, SoftTimeLimitExceeded),
    "retry_backoff": True,
    "retry_backoff_max": 600,
    "retry_jitter": True,
    "max_retries": settings.stage_max_retries,
    "soft_time_limit": 300,
    "time_limit": 360,
}


@worker_process_init.connect
def _init_capabilities(**_: Any) -> None:
    """워커 프로세스 시작 시 외부 서비스 핸들을 한 번 생성"""
    get_capabilities()


def complete(stage: str, result: StageResult) -> dict[str, Any]:
    """StageResult → Celery 완료 신호

    Raises:
        Reject: 입력 검증 실패
        StageFailedError: 외부 서비스 실패 (재시도 대상)
    """
    if result.ok:
        return result.model_dump(exclude_none=True)

    error = result.error
    if error is None:
        raise StageFailedError(f"{stage}: 알 수 없는 실패")

    if error.kind == "validation":
        logger.error(f"[{stage}] 입력 오류 (재시도 안 함): {error.message}")
        raise Reject(error.message, requeue=False)

    logger.error(f"[{stage}] 실패: {error.message}")
    raise StageFailedError(f"{stage}: {error.message}")


@celery_app.task(name=TaskName.PROCESS_IMAGE, **RETRY_OPTIONS)
def process_image(event: dict[str, Any]) -> dict[str, Any]:
    """스토리지 object 알림 처리 (Ingestion + Fan-out)"""
    return complete("process_image", ingestion.process_image(get_capabilities(), event))


@celery_app.task(name=TaskName.TRANSLATE_TEXT, **RETRY_OPTIONS)
def translate_text(payload: dict[str, Any]) -> dict[str, Any]:
    """번역 토픽 구독 task"""
    return complete("translate_text", translate.translate_text(get_capabilities(), payload))


@celery_app.task(name=TaskName.SAVE_RESULT, **RETRY_OPTIONS)
def save_result(payload: dict[str, Any]) -> dict[str, Any]:
    """결과 토픽 구독 task"""
    return complete("save_result", save.save_result(get_capabilities(), payload))
