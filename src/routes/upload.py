"""Upload API 라우트

이미지를 업로드 버킷에 저장하고 object 알림을 Ingestion 큐로 발행한다.
"""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from src.config import get_settings
from src.constants import ResourceState
from src.infra.messaging import MessagingError
from src.infra.storage import StorageError
from src.services import upload as upload_service

router = APIRouter(prefix="/upload", tags=["upload"])
logger = logging.getLogger(__name__)


@router.post("", response_model=upload_service.UploadResponse, status_code=status.HTTP_201_CREATED)
async def create_upload(file: Annotated[UploadFile, File()]) -> upload_service.UploadResponse:
    try:
        response = await upload_service.create_upload(file)
    except upload_service.InvalidImageError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_IMAGE", "message": str(e)},
        ) from None
    except StorageError as e:
        logger.error(f"업로드 저장 실패: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "STORAGE_UNAVAILABLE", "message": "이미지 저장에 실패했습니다"},
        ) from None

    try:
        await asyncio.to_thread(
            upload_service.notify, response.bucket, response.name, ResourceState.EXISTS
        )
    except MessagingError as e:
        logger.error(f"object 알림 발행 실패: {e}")
        try:
            upload_service.rollback_upload(response.name)
        except StorageError:
            logger.error(f"업로드 롤백 실패: {response.name}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "code": "QUEUE_UNAVAILABLE",
                "message": "작업 큐잉에 실패했습니다. 잠시 후 다시 시도해주세요.",
            },
        ) from None

    return response


@router.delete("/{name:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_upload(name: str) -> None:
    try:
        upload_service.delete_upload(name)
    except upload_service.ObjectNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "OBJECT_NOT_FOUND", "message": f"object를 찾을 수 없습니다: {name}"},
        ) from None
    except StorageError as e:
        logger.error(f"object 삭제 실패: {name} - {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "STORAGE_UNAVAILABLE", "message": "object 삭제에 실패했습니다"},
        ) from None

    try:
        await asyncio.to_thread(
            upload_service.notify, get_settings().upload_bucket, name, ResourceState.NOT_EXISTS
        )
    except MessagingError as e:
        # 삭제 알림은 파이프라인에서 no-op
        logger.warning(f"삭제 알림 발행 실패: {name} - {e}")
