"""Detection Protocol

교체 가능한 이미지 텍스트 추출(OCR) 구현을 위한 인터페이스 정의.
"""

from typing import Protocol

from src.exceptions import CapabilityError
from src.infra.storage.base import BlobFile


class DetectionError(CapabilityError):
    pass


class TextDetector(Protocol):
    """이미지 텍스트 추출 인터페이스

    구현체:
    - GeminiTextDetection: Google Gemini API
    """

    def detect(self, file: BlobFile) -> str:
        """저장된 이미지에서 텍스트 추출

        Args:
            file: 이미지 object 핸들

        Returns:
            str: 추출된 전체 텍스트 (텍스트가 없으면 빈 문자열)

        Raises:
            DetectionError: 이미지 읽기 또는 API 호출 실패 시
        """
        ...
