"""Celery/kombu 기반 메시징 구현체

토픽 = 브로커 큐. 토픽마다 구독 task가 하나 있고, 발행은 해당 task를
토픽 이름의 큐로 보내는 것으로 구현한다. 워커는 `-Q <topic>`으로 구독한다.
"""

import logging
from typing import Any

from celery import Celery
from kombu import Exchange, Queue
from kombu.common import maybe_declare
from kombu.exceptions import KombuError

from src.infra.messaging.base import MessagingError

logger = logging.getLogger(__name__)


class CeleryTopic:
    def __init__(self, app: Celery, name: str, task_name: str | None) -> None:
        self._app = app
        self._name = name
        self._task_name = task_name

    @property
    def name(self) -> str:
        return self._name

    def get_or_create(self) -> None:
        if self._task_name is None:
            raise MessagingError(f"구독자가 없는 토픽: {self._name}")

        queue = Queue(self._name, Exchange(self._name, type="direct"), routing_key=self._name)
        try:
            with self._app.connection_for_write() as conn:
                maybe_declare(queue, conn.default_channel, retry=True)
        except (KombuError, OSError) as e:
            raise MessagingError(f"토픽 생성 실패: {self._name} - {e}") from e

    def publish(self, payload: dict[str, Any]) -> None:
        if self._task_name is None:
            raise MessagingError(f"구독자가 없는 토픽: {self._name}")

        try:
            result = self._app.send_task(self._task_name, args=[payload], queue=self._name)
        except (KombuError, OSError) as e:
            raise MessagingError(f"발행 실패: {self._name} - {e}") from e

        logger.debug(f"발행 완료: topic={self._name}, message_id={result.id}")


class CeleryMessaging:
    """
    Args:
        app: Celery 앱
        subscriptions: 토픽 이름 → 구독 task 이름
    """

    def __init__(self, app: Celery, subscriptions: dict[str, str]) -> None:
        self._app = app
        self._subscriptions = dict(subscriptions)

    def topic(self, name: str) -> CeleryTopic:
        return CeleryTopic(self._app, name, self._subscriptions.get(name))
