import tempfile
import threading
from collections.abc import Generator
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.config import Settings
from src.infra.messaging import MessagingError, set_messaging
from src.infra.storage import BlobFile, LocalStorage, set_storage
from src.main import app
from src.services.capabilities import Capabilities, set_capabilities


def make_test_image(width: int = 800, height: int = 600, fmt: str = "PNG") -> BytesIO:
    """테스트용 실제 이미지 바이트 생성"""
    img = Image.new("RGB", (width, height), color="white")
    buf = BytesIO()
    img.save(buf, format=fmt)
    buf.seek(0)
    return buf


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "translate_api_key": "test-key",
        "to_lang": ["en", "fr"],
        "translate_topic": "test-translate",
        "result_topic": "test-result",
        "result_bucket": "test-results",
        "ingest_queue": "test-ingest",
        "upload_bucket": "test-uploads",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class InMemoryTopic:
    def __init__(self, messaging: "InMemoryMessaging", name: str) -> None:
        self._messaging = messaging
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get_or_create(self) -> None:
        if self._name in self._messaging.fail_create:
            raise MessagingError(f"토픽 생성 실패: {self._name}")
        with self._messaging.lock:
            self._messaging.created.add(self._name)

    def publish(self, payload: dict[str, Any]) -> None:
        if self._name in self._messaging.fail_publish:
            raise MessagingError(f"발행 실패: {self._name}")
        with self._messaging.lock:
            self._messaging.published.append((self._name, dict(payload)))


class InMemoryMessaging:
    """발행 기록용 메시징 fake. fail_create/fail_publish에 토픽 이름을 넣으면 실패."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.created: set[str] = set()
        self.published: list[tuple[str, dict[str, Any]]] = []
        self.fail_create: set[str] = set()
        self.fail_publish: set[str] = set()

    def topic(self, name: str) -> InMemoryTopic:
        return InMemoryTopic(self, name)

    def messages(self, topic: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.published if name == topic]


class FakeDetector:
    def __init__(self, text: str = "Hello world", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[str] = []

    def detect(self, file: BlobFile) -> str:
        self.calls.append(file.name)
        if self.error:
            raise self.error
        return self.text


class FakeTranslator:
    """`[{target}] {text}` 형태로 번역하는 fake"""

    def __init__(
        self,
        language: str = "en",
        detect_error: Exception | None = None,
        translate_error: Exception | None = None,
    ) -> None:
        self.language = language
        self.detect_error = detect_error
        self.translate_error = translate_error
        self.calls: list[tuple[str, str | None, str]] = []

    def detect_language(self, text: str) -> str:
        if self.detect_error:
            raise self.detect_error
        return self.language

    def translate(self, text: str, source: str | None, target: str) -> str:
        self.calls.append((text, source, target))
        if self.translate_error:
            raise self.translate_error
        return f"[{target}] {text}"


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_storage(temp_storage_dir: Path) -> LocalStorage:
    return LocalStorage(base_dir=temp_storage_dir)


@pytest.fixture
def messaging() -> InMemoryMessaging:
    return InMemoryMessaging()


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def caps(
    settings: Settings,
    local_storage: LocalStorage,
    messaging: InMemoryMessaging,
    detector: FakeDetector,
    translator: FakeTranslator,
) -> Generator[Capabilities, None, None]:
    capabilities = Capabilities(
        settings=settings,
        storage=local_storage,
        messaging=messaging,
        detector=detector,
        translator=translator,
    )
    set_capabilities(capabilities)
    yield capabilities
    set_capabilities(None)


@pytest.fixture
def client(
    local_storage: LocalStorage, messaging: InMemoryMessaging
) -> Generator[TestClient, None, None]:
    set_storage(local_storage)
    set_messaging(messaging)
    yield TestClient(app)
    set_storage(None)
    set_messaging(None)
