from typing import Any, Protocol

from src.exceptions import CapabilityError


class MessagingError(CapabilityError):
    pass


class Topic(Protocol):
    @property
    def name(self) -> str: ...
    def get_or_create(self) -> None:
        """토픽이 없으면 생성 (멱등)

        Raises:
            MessagingError: 생성 실패 또는 구독자가 없는 토픽인 경우
        """
        ...

    def publish(self, payload: dict[str, Any]) -> None:
        """JSON 페이로드를 메시지 본문으로 발행

        Raises:
            MessagingError: 발행 실패 시
        """
        ...


class Messaging(Protocol):
    """메시지 전달 인터페이스. 전달은 at-least-once, 메시지 간 순서 보장 없음."""

    def topic(self, name: str) -> Topic: ...
