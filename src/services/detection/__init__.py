"""Detection 모듈

사용법:
    from src.services.detection import get_detection

    detector = get_detection()
    text = detector.detect(file)

백엔드 선택 (.env DETECTION_PROVIDER):
    - "gemini": Google Gemini API (기본값)
"""

from src.config import get_settings
from src.services.detection.base import DetectionError, TextDetector
from src.services.detection.gemini import GeminiTextDetection

__all__ = ["DetectionError", "TextDetector", "get_detection", "set_detection"]

_detector: TextDetector | None = None


def get_detection() -> TextDetector:
    """설정에 따라 detection 백엔드 반환"""
    global _detector
    if _detector is None:
        settings = get_settings()
        if settings.detection_provider == "gemini":
            _detector = GeminiTextDetection(
                api_key=settings.translate_api_key,
                model=settings.gemini_model,
            )
        else:
            raise ValueError(f"Unknown detection provider: {settings.detection_provider!r}")
    return _detector


def set_detection(detector: TextDetector | None) -> None:
    """detection 백엔드 설정 (테스트용)"""
    global _detector
    _detector = detector
