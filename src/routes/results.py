from fastapi import APIRouter, HTTPException, status

from src.infra.storage import StorageError
from src.services import upload as upload_service

router = APIRouter(prefix="/results", tags=["results"])


@router.get("/{name:path}", response_model=upload_service.ResultResponse)
async def read_result(name: str) -> upload_service.ResultResponse:
    try:
        return upload_service.get_result(name)
    except (upload_service.ObjectNotFoundError, StorageError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "RESULT_NOT_FOUND", "message": f"결과를 찾을 수 없습니다: {name}"},
        ) from None
