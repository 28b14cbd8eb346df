from pathlib import Path
from unittest.mock import patch

import pytest

from src.infra.storage import LocalStorage, StorageError


class TestLocalStorage:
    def test_save_and_download(self, local_storage: LocalStorage, temp_storage_dir: Path) -> None:
        file = local_storage.bucket("results").file("a_to_fr.txt")

        file.save("Bonjour")

        assert file.exists()
        assert file.download() == "Bonjour".encode()
        assert (temp_storage_dir / "results" / "a_to_fr.txt").read_text(encoding="utf-8") == (
            "Bonjour"
        )

    def test_save_bytes(self, local_storage: LocalStorage) -> None:
        file = local_storage.bucket("images").file("raw.bin")

        file.save(b"\x00\x01")

        assert file.download() == b"\x00\x01"

    def test_save_overwrites(self, local_storage: LocalStorage) -> None:
        file = local_storage.bucket("results").file("a.txt")

        file.save("first")
        file.save("second")

        assert file.download() == b"second"

    def test_nested_object_name(self, local_storage: LocalStorage, temp_storage_dir: Path) -> None:
        file = local_storage.bucket("images").file("upload_1/photo.png")

        file.save(b"png")

        assert (temp_storage_dir / "images" / "upload_1" / "photo.png").exists()
        assert file.name == "upload_1/photo.png"
        assert file.bucket_name == "images"

    def test_handle_does_not_touch_disk(
        self, local_storage: LocalStorage, temp_storage_dir: Path
    ) -> None:
        file = local_storage.bucket("images").file("photo.png")

        assert not file.exists()
        assert list(temp_storage_dir.iterdir()) == []

    def test_download_missing_raises(self, local_storage: LocalStorage) -> None:
        with pytest.raises(StorageError, match="object 없음"):
            local_storage.bucket("images").file("missing.png").download()

    def test_delete(self, local_storage: LocalStorage) -> None:
        file = local_storage.bucket("images").file("photo.png")
        file.save(b"png")

        assert file.delete() is True
        assert file.delete() is False
        assert not file.exists()

    @pytest.mark.parametrize("name", ["", "/etc/passwd", "../other/x", "a/../../x"])
    def test_rejects_escaping_object_names(self, local_storage: LocalStorage, name: str) -> None:
        with pytest.raises(StorageError):
            local_storage.bucket("images").file(name)

    @pytest.mark.parametrize("name", ["", "..", "a/b"])
    def test_rejects_invalid_bucket_names(self, local_storage: LocalStorage, name: str) -> None:
        with pytest.raises(StorageError):
            local_storage.bucket(name)

    def test_write_failure_raises_storage_error(
        self, local_storage: LocalStorage, temp_storage_dir: Path
    ) -> None:
        # 버킷 경로에 일반 파일이 있으면 디렉토리 생성 실패
        (temp_storage_dir / "results").write_text("not a dir")
        file = local_storage.bucket("results").file("a.txt")

        with pytest.raises(StorageError, match="저장 실패"):
            file.save("text")

    def test_delete_failure_raises_storage_error(self, local_storage: LocalStorage) -> None:
        file = local_storage.bucket("images").file("photo.png")
        file.save(b"png")

        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            with pytest.raises(StorageError, match="삭제 실패"):
                file.delete()

        assert file.exists()
