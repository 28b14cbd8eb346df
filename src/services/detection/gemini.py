"""Gemini 기반 텍스트 추출 구현체"""

# pyright: reportMissingTypeStubs=false

import json
import logging

from google import genai
from google.genai import types

from src.infra.storage.base import BlobFile, StorageError
from src.services.detection.base import DetectionError

logger = logging.getLogger(__name__)

DETECT_PROMPT = """이미지에 보이는 모든 텍스트를 읽기 순서대로 추출해주세요.

규칙:
- 원문 그대로 옮기고 번역하지 않음
- 줄바꿈은 유지
- 텍스트가 없으면 text를 빈 문자열로

JSON으로만 응답:
{"text": "..."}"""

MAGIC_BYTES = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG": "image/png",
    b"GIF8": "image/gif",
    b"RIFF": "image/webp",
}


def _detect_mime_type(content: bytes) -> str:
    for magic, mime in MAGIC_BYTES.items():
        if content.startswith(magic):
            return mime
    raise DetectionError("지원하지 않는 이미지 형식")


class GeminiTextDetection:
    """Google Gemini API를 사용한 이미지 텍스트 추출"""

    def __init__(self, api_key: str, model: str) -> None:
        self._api_key = api_key
        self._model = model

    def detect(self, file: BlobFile) -> str:
        """
        Raises:
            DetectionError: API 키 누락, 이미지 읽기 실패, 빈 응답, 파싱 실패 등
        """
        if not self._api_key:
            raise DetectionError("TRANSLATE_API_KEY가 설정되지 않았습니다")

        try:
            content = file.download()
        except StorageError as e:
            raise DetectionError(f"이미지 읽기 실패: {e}") from e

        part = types.Part.from_bytes(data=content, mime_type=_detect_mime_type(content))
        client = genai.Client(api_key=self._api_key)
        return self._call_gemini(client, part)

    def _call_gemini(self, client: genai.Client, part: types.Part) -> str:
        try:
            response = client.models.generate_content(
                model=self._model,
                contents=[DETECT_PROMPT, part],
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
        except Exception as e:
            raise DetectionError(f"Gemini 호출 실패: {e}") from e

        if not response.text:
            raise DetectionError("빈 응답")

        try:
            raw = json.loads(response.text)
        except json.JSONDecodeError as e:
            raise DetectionError(f"JSON 파싱 실패: {e}") from e

        if not isinstance(raw, dict) or not isinstance(raw.get("text"), str):
            raise DetectionError(f"응답 형식 오류: {response.text[:100]}")

        return raw["text"]
