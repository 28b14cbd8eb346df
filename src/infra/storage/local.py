import os
import tempfile
from pathlib import Path

from src.infra.storage.base import StorageError


class LocalFile:
    """로컬 파일 시스템 object. 경로는 `{base_dir}/{bucket}/{name}`"""

    def __init__(self, bucket_name: str, name: str, path: Path) -> None:
        self._bucket_name = bucket_name
        self._name = name
        self.path = path

    @property
    def name(self) -> str:
        return self._name

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def save(self, content: str | bytes) -> None:
        """object 전체 내용을 덮어쓴다 (append/버저닝 없음)

        임시 파일에 쓴 뒤 교체하므로 중간 상태의 파일이 노출되지 않는다.

        Raises:
            StorageError: 쓰기 실패 시
        """
        data = content.encode("utf-8") if isinstance(content, str) else content
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"저장 실패: {self._bucket_name}/{self._name} - {e}") from e

    def download(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError as e:
            raise StorageError(f"object 없음: {self._bucket_name}/{self._name}") from e
        except OSError as e:
            raise StorageError(f"읽기 실패: {self._bucket_name}/{self._name} - {e}") from e

    def exists(self) -> bool:
        return self.path.is_file()

    def delete(self) -> bool:
        if not self.path.is_file():
            return False
        try:
            self.path.unlink()
        except OSError as e:
            raise StorageError(f"삭제 실패: {self._bucket_name}/{self._name} - {e}") from e
        return True


class LocalBucket:
    def __init__(self, name: str, root: Path) -> None:
        self._name = name
        self.root = root

    @property
    def name(self) -> str:
        return self._name

    def file(self, name: str) -> LocalFile:
        """
        Raises:
            StorageError: 버킷 밖을 가리키는 object 이름인 경우
        """
        if not name or name.startswith("/"):
            raise StorageError(f"유효하지 않은 object 이름: {name!r}")

        path = (self.root / name).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise StorageError(f"유효하지 않은 object 이름: {name!r}")

        return LocalFile(bucket_name=self._name, name=name, path=path)


class LocalStorage:
    """로컬 파일 시스템 blob 저장소 구현체. 버킷마다 하위 디렉토리 하나."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def bucket(self, name: str) -> LocalBucket:
        if not name or "/" in name or name in (".", ".."):
            raise StorageError(f"유효하지 않은 버킷 이름: {name!r}")
        return LocalBucket(name=name, root=self.base_dir / name)
