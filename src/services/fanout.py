"""Fan-out 단계

원문 언어를 감지하고 대상 언어마다 메시지를 하나씩 발행한다.
원문 언어와 같은 대상 언어는 번역 단계를 건너뛰고 결과 토픽으로 바로 보낸다.
"""

import asyncio
import logging
from typing import Any

from src.exceptions import CapabilityError
from src.infra.messaging import Messaging
from src.infra.storage import BlobFile
from src.schemas.pipeline import StageResult, TranslationTask
from src.services.capabilities import Capabilities
from src.services.publisher import publish_result

logger = logging.getLogger(__name__)


def unique_languages(languages: list[str]) -> list[str]:
    """소문자로 정규화 후 중복 제거 (첫 등장 순서 유지)"""
    seen: dict[str, None] = {}
    for lang in languages:
        normalized = lang.strip().lower()
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


def build_messages(
    caps: Capabilities, text: str, filename: str, source_lang: str
) -> list[tuple[str, dict[str, Any]]]:
    """(토픽, 페이로드) 목록 생성

    short-circuit 페이로드도 `from` 필드를 포함한 번역 요청 형태 그대로 결과 토픽에 보낸다.
    """
    settings = caps.settings
    messages: list[tuple[str, dict[str, Any]]] = []

    for lang in unique_languages(settings.to_lang):
        task = TranslationTask(text=text, filename=filename, lang=lang, source_lang=source_lang)
        topic = settings.result_topic if lang == source_lang else settings.translate_topic
        messages.append((topic, task.to_message()))

    return messages


async def _publish_all(messaging: Messaging, messages: list[tuple[str, dict[str, Any]]]) -> None:
    """모든 발행을 동시에 실행하고 전부 끝날 때까지 대기. 하나라도 실패하면 예외 전파."""
    await asyncio.gather(
        *(
            asyncio.to_thread(publish_result, messaging, topic, payload)
            for topic, payload in messages
        )
    )


def fan_out(caps: Capabilities, text: str, file: BlobFile) -> StageResult:
    """이벤트 루프 안에서 호출 불가 (내부에서 asyncio.run 사용). 동기 코드에서만 호출."""
    try:
        source_lang = caps.translator.detect_language(text).strip().lower()
    except CapabilityError as e:
        logger.error(f"언어 감지 실패: {file.name} - {e}")
        return StageResult.failure("capability", str(e))

    logger.info(f'언어 감지: "{source_lang}" ({file.name})')

    messages = build_messages(caps, text, file.name, source_lang)
    try:
        asyncio.run(_publish_all(caps.messaging, messages))
    except CapabilityError as e:
        logger.error(f"Fan-out 발행 실패: {file.name} - {e}")
        return StageResult.failure("capability", str(e))

    return StageResult.success(published=len(messages))
