"""Translation 단계

번역 요청 메시지를 받아 번역한 뒤 결과 토픽으로 발행한다.
"""

import logging
from typing import Any

from pydantic import ValidationError

from src.exceptions import CapabilityError, InvalidPayloadError
from src.schemas.pipeline import StageResult, TranslationResult, TranslationTask, parse_message
from src.services.capabilities import Capabilities
from src.services.publisher import publish_result
from src.services.translation import TranslationError

logger = logging.getLogger(__name__)


def translate_text(caps: Capabilities, payload: Any) -> StageResult:
    try:
        task = parse_message(TranslationTask, payload)
    except InvalidPayloadError as e:
        logger.warning(f"번역 요청 거부: {e}")
        return StageResult.failure("validation", str(e))

    logger.info(f"{task.lang}로 번역: {task.filename}")

    try:
        translated = caps.translator.translate(task.text, task.source_lang, task.lang)
        try:
            result = TranslationResult(text=translated, filename=task.filename, lang=task.lang)
        except ValidationError as e:
            raise TranslationError(f"빈 번역 결과: {task.filename} ({task.lang})") from e

        publish_result(caps.messaging, caps.settings.result_topic, result.to_message())
    except CapabilityError as e:
        logger.error(f"번역 실패: {task.filename} ({task.lang}) - {e}")
        return StageResult.failure("capability", str(e))

    logger.info(f"{task.lang} 번역 완료: {task.filename}")
    return StageResult.success(published=1)
