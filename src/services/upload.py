"""Upload 서비스: 이미지 업로드 검증/저장 + object 알림 발행

업로드된 이미지는 UPLOAD_BUCKET에 `{upload_id}/{원본 파일명}`으로 저장되고,
Ingestion 큐로 object-created 알림이 발행된다.
"""

import uuid
from datetime import UTC, datetime
from io import BytesIO
from pathlib import Path

from fastapi import UploadFile
from PIL import Image

from src.config import get_settings
from src.constants import Limits
from src.infra.messaging import get_messaging
from src.infra.storage import StorageError, get_storage
from src.schemas.base import BaseSchema
from src.schemas.pipeline import ImageObject
from src.services.fanout import unique_languages
from src.services.publisher import publish_result
from src.services.save import rename_for_save

ALLOWED_TYPES = {"image/jpeg", "image/png"}

MAGIC_BYTES = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG": "image/png",
}


class InvalidImageError(Exception):
    pass


class ObjectNotFoundError(Exception):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"존재하지 않는 object: {name}")


class UploadResponse(BaseSchema):
    upload_id: str
    bucket: str
    name: str
    content_type: str
    size: int
    created_at: str
    result_names: list[str]


class ResultResponse(BaseSchema):
    bucket: str
    name: str
    text: str


def _generate_upload_id() -> str:
    return f"upload_{uuid.uuid4().hex[:8]}"


def _validate_content_type(content_type: str | None) -> str:
    if not content_type or content_type not in ALLOWED_TYPES:
        raise InvalidImageError(f"지원하지 않는 파일 형식: {content_type or '알 수 없음'}")
    return content_type


def _detect_image_type(content: bytes) -> str:
    for magic, mime in MAGIC_BYTES.items():
        if content.startswith(magic):
            return mime
    raise InvalidImageError("유효하지 않은 이미지 파일")


def _validate_decodable(content: bytes) -> None:
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
    except Exception as e:
        raise InvalidImageError("이미지 디코딩 실패") from e


async def _read_with_size_limit(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total_size = 0

    while chunk := await file.read(Limits.UPLOAD_CHUNK_SIZE):
        total_size += len(chunk)
        if total_size > Limits.MAX_UPLOAD_SIZE:
            raise InvalidImageError(
                f"파일 크기 초과: {total_size}+ bytes (최대 {Limits.MAX_UPLOAD_SIZE} bytes)"
            )
        chunks.append(chunk)

    return b"".join(chunks)


def _object_name(upload_id: str, filename: str | None) -> str:
    base = Path(filename or "").name
    if not base or base.startswith("."):
        base = "image"
    return f"{upload_id}/{base}"


def notify(bucket: str, name: str, resource_state: str) -> None:
    """스토리지 object 알림을 Ingestion 큐로 발행

    Raises:
        MessagingError: 발행 실패 시
    """
    event = ImageObject(bucket=bucket, name=name, resource_state=resource_state)
    publish_result(get_messaging(), get_settings().ingest_queue, event.model_dump(by_alias=True))


async def create_upload(file: UploadFile) -> UploadResponse:
    """
    Raises:
        InvalidImageError: 파일 형식, 크기, 디코딩 검증 실패 시
        StorageError: 저장 실패 시
    """
    settings = get_settings()
    content_type = _validate_content_type(file.content_type)
    if file.size is not None and file.size > Limits.MAX_UPLOAD_SIZE:
        raise InvalidImageError(
            f"파일 크기 초과: {file.size} bytes (최대 {Limits.MAX_UPLOAD_SIZE} bytes)"
        )

    content = await _read_with_size_limit(file)
    detected_type = _detect_image_type(content)
    if detected_type != content_type:
        raise InvalidImageError(f"파일 형식 불일치: 헤더 {content_type}, 실제 {detected_type}")
    _validate_decodable(content)

    upload_id = _generate_upload_id()
    name = _object_name(upload_id, file.filename)
    get_storage().bucket(settings.upload_bucket).file(name).save(content)

    return UploadResponse(
        upload_id=upload_id,
        bucket=settings.upload_bucket,
        name=name,
        content_type=content_type,
        size=len(content),
        created_at=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        result_names=[rename_for_save(name, lang) for lang in unique_languages(settings.to_lang)],
    )


def delete_upload(name: str) -> None:
    """
    Raises:
        ObjectNotFoundError: object가 없거나 유효하지 않은 이름인 경우
        StorageError: 삭제 실패 시
    """
    settings = get_settings()
    try:
        file = get_storage().bucket(settings.upload_bucket).file(name)
    except StorageError:
        raise ObjectNotFoundError(name) from None
    if not file.delete():
        raise ObjectNotFoundError(name)


def get_result(name: str) -> ResultResponse:
    """
    Raises:
        ObjectNotFoundError: 저장된 결과가 없는 경우
    """
    settings = get_settings()
    file = get_storage().bucket(settings.result_bucket).file(name)
    if not file.exists():
        raise ObjectNotFoundError(name)
    return ResultResponse(
        bucket=settings.result_bucket, name=name, text=file.download().decode("utf-8")
    )


def rollback_upload(name: str) -> None:
    get_storage().bucket(get_settings().upload_bucket).file(name).delete()
