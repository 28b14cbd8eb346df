from pathlib import Path

from src.config import get_settings

from .base import BlobFile, BlobStore, Bucket, StorageError
from .local import LocalStorage

__all__ = [
    "BlobFile",
    "BlobStore",
    "Bucket",
    "LocalStorage",
    "StorageError",
    "get_storage",
    "set_storage",
]


def _find_project_root() -> Path:
    """pyproject.toml 위치를 프로젝트 루트로 탐색"""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    raise RuntimeError("프로젝트 루트를 찾을 수 없음")


class _StorageHolder:
    instance: BlobStore | None = None


def get_storage() -> BlobStore:
    if _StorageHolder.instance is None:
        storage_dir = Path(get_settings().storage_dir)
        if not storage_dir.is_absolute():
            storage_dir = _find_project_root() / storage_dir
        _StorageHolder.instance = LocalStorage(base_dir=storage_dir)
    return _StorageHolder.instance


def set_storage(storage: BlobStore | None) -> None:
    _StorageHolder.instance = storage
