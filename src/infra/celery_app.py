from celery import Celery

from src.config import get_settings
from src.constants import TTL, TaskName

settings = get_settings()

celery_app = Celery(
    "ocr_pipeline",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    result_expires=TTL.CELERY_RESULT,
    imports=["src.infra.workers.pipeline_tasks"],
    # at-least-once: 워커가 죽으면 메시지 재전달
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_create_missing_queues=True,
    worker_prefetch_multiplier=1,
    task_routes={
        TaskName.PROCESS_IMAGE: {"queue": settings.ingest_queue},
        TaskName.TRANSLATE_TEXT: {"queue": settings.translate_topic},
        TaskName.SAVE_RESULT: {"queue": settings.result_topic},
    },
)
