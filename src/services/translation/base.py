"""Translation Protocol

교체 가능한 언어 감지/번역 구현을 위한 인터페이스 정의.
언어 코드는 ISO-639-1 소문자 ("en", "fr", ...).
"""

from typing import Protocol

from src.exceptions import CapabilityError


class TranslationError(CapabilityError):
    pass


class Translator(Protocol):
    """언어 감지 + 텍스트 번역 인터페이스

    구현체:
    - GeminiTranslation: Google Gemini API
    """

    def detect_language(self, text: str) -> str:
        """텍스트의 언어 감지

        Raises:
            TranslationError: 감지 실패 시
        """
        ...

    def translate(self, text: str, source: str | None, target: str) -> str:
        """텍스트 번역

        Args:
            text: 원문
            source: 원문 언어 (None이면 자동 감지)
            target: 번역할 언어

        Raises:
            TranslationError: 번역 실패 시
        """
        ...
