"""Save 단계

번역 결과 메시지를 `{RESULT_BUCKET}/{파일명}_to_{lang}.txt`로 저장한다.
같은 메시지가 다시 와도 같은 object를 덮어쓰므로 결과는 동일하다.
"""

import logging
from typing import Any

from src.constants import SaveName
from src.exceptions import CapabilityError, InvalidPayloadError
from src.infra.storage import StorageError
from src.schemas.pipeline import StageResult, TranslationResult, parse_message
from src.services.capabilities import Capabilities

logger = logging.getLogger(__name__)


def rename_for_save(filename: str, lang: str) -> str:
    """마지막 확장자를 `_to_{lang}.txt`로 교체. 확장자가 없으면 이름 끝에 붙인다.

    >>> rename_for_save("a.jpg", "fr")
    'a_to_fr.txt'
    >>> rename_for_save("noext", "de")
    'noext_to_de.txt'
    """
    suffix = SaveName.SUFFIX.format(lang=lang)
    renamed, count = SaveName.EXTENSION_PATTERN.subn(lambda _: suffix, filename, count=1)
    return renamed if count else filename + suffix


def save_result(caps: Capabilities, payload: Any) -> StageResult:
    try:
        result = parse_message(TranslationResult, payload)
    except InvalidPayloadError as e:
        logger.warning(f"저장 요청 거부: {e}")
        return StageResult.failure("validation", str(e))

    bucket_name = caps.settings.result_bucket
    filename = rename_for_save(result.filename, result.lang)
    logger.info(f"결과 저장: {bucket_name}/{filename}")

    try:
        file = caps.storage.bucket(bucket_name).file(filename)
    except StorageError as e:
        return StageResult.failure("validation", str(e))

    try:
        file.save(result.text)
    except CapabilityError as e:
        logger.error(f"저장 실패: {bucket_name}/{filename} - {e}")
        return StageResult.failure("capability", str(e))

    logger.info(f"텍스트 저장 완료: {filename}")
    return StageResult.success(saved_path=f"{bucket_name}/{filename}")
