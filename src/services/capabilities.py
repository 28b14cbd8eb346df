"""외부 서비스 핸들 묶음

프로세스 시작 시 한 번 생성되어 각 단계 핸들러에 명시적으로 전달된다.
"""

from dataclasses import dataclass

from src.config import Settings, get_settings
from src.infra.messaging import Messaging, get_messaging
from src.infra.storage import BlobStore, get_storage
from src.services.detection import TextDetector, get_detection
from src.services.translation import Translator, get_translation


@dataclass(frozen=True)
class Capabilities:
    settings: Settings
    storage: BlobStore
    messaging: Messaging
    detector: TextDetector
    translator: Translator


class _CapabilitiesHolder:
    instance: Capabilities | None = None


def build_capabilities() -> Capabilities:
    return Capabilities(
        settings=get_settings(),
        storage=get_storage(),
        messaging=get_messaging(),
        detector=get_detection(),
        translator=get_translation(),
    )


def get_capabilities() -> Capabilities:
    if _CapabilitiesHolder.instance is None:
        _CapabilitiesHolder.instance = build_capabilities()
    return _CapabilitiesHolder.instance


def set_capabilities(capabilities: Capabilities | None) -> None:
    _CapabilitiesHolder.instance = capabilities
