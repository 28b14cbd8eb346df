from typing import Protocol

from src.exceptions import CapabilityError


class StorageError(CapabilityError):
    pass


class BlobFile(Protocol):
    """버킷 내 단일 object 핸들. 생성만으로는 스토리지에 접근하지 않는다."""

    @property
    def name(self) -> str: ...
    @property
    def bucket_name(self) -> str: ...
    def save(self, content: str | bytes) -> None: ...
    def download(self) -> bytes: ...
    def exists(self) -> bool: ...
    def delete(self) -> bool: ...


class Bucket(Protocol):
    @property
    def name(self) -> str: ...
    def file(self, name: str) -> BlobFile: ...


class BlobStore(Protocol):
    """Blob 저장소 인터페이스. LocalStorage, GCS/S3 구현체 등으로 교체 가능."""

    def bucket(self, name: str) -> Bucket: ...
