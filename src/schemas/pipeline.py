"""파이프라인 메시지 모델

Ingestion → Fan-out → Translation → Save 각 단계가 주고받는 스키마.
모든 메시지는 JSON 객체이며, 알 수 없는 필드는 무시한다.
"""

from typing import Any, Literal, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.constants import ResourceState
from src.exceptions import InvalidPayloadError

ErrorKind = Literal["validation", "capability"]

M = TypeVar("M", bound=BaseModel)


class ImageObject(BaseModel):
    """스토리지 object-created/deleted 알림 페이로드

    bucket/name 누락 여부는 Ingestion 단계에서 검증하므로 여기서는 optional.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    bucket: str | None = None
    name: str | None = None
    resource_state: Literal["exists", "not_exists"] = Field(
        default=ResourceState.EXISTS, alias="resourceState"
    )

    @property
    def is_deleted(self) -> bool:
        return self.resource_state == ResourceState.NOT_EXISTS


class DetectedText(BaseModel):
    text: str
    source_language: str


class TranslationTask(BaseModel):
    """번역 요청 메시지 (Fan-out → Translation)

    원본 언어는 wire 상에서 `from` 필드로 전달된다.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: str = Field(min_length=1)
    filename: str = Field(min_length=1)
    lang: str = Field(min_length=1)
    source_lang: str | None = Field(default=None, alias="from")

    def to_message(self) -> dict[str, str]:
        message = {"text": self.text, "filename": self.filename, "lang": self.lang}
        if self.source_lang:
            message["from"] = self.source_lang
        return message


class TranslationResult(BaseModel):
    """번역 결과 메시지 (Translation/Fan-out → Save)"""

    model_config = ConfigDict(extra="ignore")

    text: str = Field(min_length=1)
    filename: str = Field(min_length=1)
    lang: str = Field(min_length=1)

    def to_message(self) -> dict[str, str]:
        return self.model_dump()


class StageError(BaseModel):
    kind: ErrorKind
    message: str


class StageResult(BaseModel):
    """단계 실행 결과

    성공/실패를 하나의 타입으로 표현한다. 호스팅 플랫폼 어댑터(Celery task)가
    이를 런타임의 완료 신호로 변환한다.
    """

    status: Literal["success", "failure"]
    published: int = 0
    saved_path: str | None = None
    message: str | None = None
    error: StageError | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(
        cls, published: int = 0, saved_path: str | None = None, message: str | None = None
    ) -> Self:
        return cls(status="success", published=published, saved_path=saved_path, message=message)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> Self:
        return cls(status="failure", error=StageError(kind=kind, message=message))


REQUIRED_MESSAGE_FIELDS = ("text", "filename", "lang")


def parse_message(model: type[M], payload: Any) -> M:
    """메시지 페이로드 검증

    text → filename → lang 순서로 누락(빈 문자열 포함)을 검사한 뒤 모델로 변환한다.

    Raises:
        InvalidPayloadError: 필수 필드 누락 또는 타입 불일치 시
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload", f"메시지가 JSON 객체가 아님: {type(payload).__name__}")

    for field in REQUIRED_MESSAGE_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value:
            raise InvalidPayloadError(
                field, f'{field}가 제공되지 않았습니다. 요청에 "{field}" 필드가 있는지 확인하세요'
            )

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError("payload", f"메시지 검증 실패: {e}") from e
