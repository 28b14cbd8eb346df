"""Gemini 기반 언어 감지/번역 구현체"""

# pyright: reportMissingTypeStubs=false

import json
import logging
from typing import Any, cast

from google import genai
from google.genai import types

from src.services.translation.base import TranslationError

logger = logging.getLogger(__name__)

DETECT_LANGUAGE_PROMPT = """다음 텍스트의 언어를 ISO-639-1 코드(소문자 2글자)로 알려주세요.

JSON으로만 응답:
{"language": "en"}

텍스트:
"""

TRANSLATE_PROMPT = """다음 텍스트를 {source} 에서 {target} (ISO-639-1 코드)로 번역해주세요.

규칙:
- 줄바꿈은 유지
- 설명 없이 번역문만

JSON으로만 응답:
{{"translated": "..."}}

텍스트:
"""


class GeminiTranslation:
    """Google Gemini API를 사용한 언어 감지 및 번역"""

    def __init__(self, api_key: str, model: str) -> None:
        self._api_key = api_key
        self._model = model

    def detect_language(self, text: str) -> str:
        raw = self._generate_json(DETECT_LANGUAGE_PROMPT + text)

        language = raw.get("language")
        if not isinstance(language, str) or not language.strip():
            raise TranslationError(f"언어 감지 결과 없음: {raw}")

        return language.strip().lower()

    def translate(self, text: str, source: str | None, target: str) -> str:
        prompt = TRANSLATE_PROMPT.format(source=source or "자동 감지된 언어", target=target)
        raw = self._generate_json(prompt + text)

        translated = raw.get("translated")
        if not isinstance(translated, str):
            raise TranslationError(f"번역 결과 없음: {raw}")

        return translated

    def _generate_json(self, prompt: str) -> dict[str, Any]:
        """
        Raises:
            TranslationError: API 키 누락, API 호출 실패, 빈 응답, 파싱 실패 등
        """
        if not self._api_key:
            raise TranslationError("TRANSLATE_API_KEY가 설정되지 않았습니다")

        client = genai.Client(api_key=self._api_key)
        try:
            response = client.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
        except Exception as e:
            raise TranslationError(f"Gemini 호출 실패: {e}") from e

        if not response.text:
            raise TranslationError("빈 응답")

        try:
            raw = json.loads(response.text)
        except json.JSONDecodeError as e:
            raise TranslationError(f"JSON 파싱 실패: {e}") from e

        if not isinstance(raw, dict):
            raise TranslationError(f"응답이 객체가 아님: {type(raw).__name__}")

        return cast(dict[str, Any], raw)
