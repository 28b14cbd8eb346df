"""Messaging 모듈

사용법:
    from src.infra.messaging import get_messaging

    messaging = get_messaging()
    messaging.topic("ocr-result").publish({...})
"""

from src.config import get_settings
from src.constants import TaskName
from src.infra.messaging.base import Messaging, MessagingError, Topic
from src.infra.messaging.broker import CeleryMessaging

__all__ = ["Messaging", "MessagingError", "Topic", "get_messaging", "set_messaging"]

_messaging: Messaging | None = None


def get_messaging() -> Messaging:
    """토픽 구독 설정을 반영한 Celery 메시징 반환"""
    global _messaging
    if _messaging is None:
        from src.infra.celery_app import celery_app

        settings = get_settings()
        _messaging = CeleryMessaging(
            celery_app,
            subscriptions={
                settings.ingest_queue: TaskName.PROCESS_IMAGE,
                settings.translate_topic: TaskName.TRANSLATE_TEXT,
                settings.result_topic: TaskName.SAVE_RESULT,
            },
        )
    return _messaging


def set_messaging(messaging: Messaging | None) -> None:
    """messaging 백엔드 설정 (테스트용)"""
    global _messaging
    _messaging = messaging
