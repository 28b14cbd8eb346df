import logging
from typing import Any

from src.infra.messaging import Messaging

logger = logging.getLogger(__name__)


def publish_result(messaging: Messaging, topic_name: str, payload: dict[str, Any]) -> None:
    """토픽이 없으면 생성한 뒤 페이로드를 발행

    로컬 재시도 없음. 재시도 정책은 메시징 전송 계층과 호출자의 몫.

    Raises:
        MessagingError: 토픽 생성 또는 발행 실패 시
    """
    topic = messaging.topic(topic_name)
    topic.get_or_create()
    topic.publish(payload)
    logger.info(
        f"발행: topic={topic_name}, filename={payload.get('filename')}, lang={payload.get('lang')}"
    )
