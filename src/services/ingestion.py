"""Ingestion 단계

스토리지 object 알림을 받아 이미지 텍스트를 추출하고, 같은 호출 안에서 Fan-out을 이어 실행한다.
"""

import logging
from typing import Any

from pydantic import ValidationError

from src.exceptions import CapabilityError
from src.infra.storage import StorageError
from src.schemas.pipeline import ImageObject, StageResult
from src.services.capabilities import Capabilities
from src.services.fanout import fan_out

logger = logging.getLogger(__name__)


def process_image(caps: Capabilities, event: Any) -> StageResult:
    try:
        image = ImageObject.model_validate(event)
    except ValidationError as e:
        logger.warning(f"유효하지 않은 알림: {e}")
        return StageResult.failure("validation", f"유효하지 않은 알림: {e}")

    if image.is_deleted:
        # 삭제 이벤트는 처리하지 않음
        logger.info(f"삭제 이벤트 무시: {image.bucket}/{image.name}")
        return StageResult.success(message="삭제 이벤트")

    if not image.bucket:
        return StageResult.failure(
            "validation", 'bucket이 제공되지 않았습니다. 요청에 "bucket" 필드가 있는지 확인하세요'
        )
    if not image.name:
        return StageResult.failure(
            "validation", 'name이 제공되지 않았습니다. 요청에 "name" 필드가 있는지 확인하세요'
        )

    try:
        file = caps.storage.bucket(image.bucket).file(image.name)
    except StorageError as e:
        return StageResult.failure("validation", str(e))

    logger.info(f"이미지 텍스트 탐색: {file.name}")
    try:
        text = caps.detector.detect(file)
    except CapabilityError as e:
        logger.error(f"텍스트 추출 실패: {file.name} - {e}")
        return StageResult.failure("capability", str(e))

    logger.info(f"텍스트 추출 완료: {file.name} ({len(text)}자)")

    if not text.strip():
        logger.info(f"텍스트 없음, 번역 생략: {file.name}")
        return StageResult.success(message="텍스트 없음")

    result = fan_out(caps, text, file)
    if result.ok:
        logger.info(f"{file.name} 처리 완료: {result.published}건 발행")
    return result
