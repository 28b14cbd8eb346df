from io import BytesIO
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from src.config import get_settings
from tests.conftest import InMemoryMessaging, make_test_image


class TestUploadPost:
    def test_upload_png_emits_object_notification(
        self, client: TestClient, messaging: InMemoryMessaging, temp_storage_dir: Path
    ) -> None:
        settings = get_settings()

        response = client.post(
            "/upload",
            files={"file": ("photo.png", make_test_image(), "image/png")},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["uploadId"].startswith("upload_")
        assert data["bucket"] == settings.upload_bucket
        assert data["name"] == f"{data['uploadId']}/photo.png"
        assert data["contentType"] == "image/png"
        assert (temp_storage_dir / settings.upload_bucket / data["name"]).exists()

        assert messaging.messages(settings.ingest_queue) == [
            {"bucket": settings.upload_bucket, "name": data["name"], "resourceState": "exists"}
        ]

    def test_upload_lists_expected_result_names(self, client: TestClient) -> None:
        response = client.post(
            "/upload",
            files={"file": ("photo.jpg", make_test_image(fmt="JPEG"), "image/jpeg")},
        )

        data = response.json()
        upload_id = data["uploadId"]
        expected = [f"{upload_id}/photo_to_{lang}.txt" for lang in get_settings().to_lang]
        assert data["resultNames"] == expected

    def test_reject_invalid_content_type(
        self, client: TestClient, messaging: InMemoryMessaging
    ) -> None:
        response = client.post(
            "/upload",
            files={"file": ("test.txt", BytesIO(b"text"), "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_IMAGE"
        assert messaging.published == []

    def test_reject_content_type_mismatch(self, client: TestClient) -> None:
        response = client.post(
            "/upload",
            files={"file": ("photo.png", make_test_image(fmt="JPEG"), "image/png")},
        )

        assert response.status_code == 400

    def test_reject_oversized_file(self, client: TestClient) -> None:
        large_content = b"\x89PNG" + b"x" * (5 * 1024 * 1024)
        response = client.post(
            "/upload",
            files={"file": ("large.png", BytesIO(large_content), "image/png")},
        )

        assert response.status_code == 400

    def test_reject_undecodable_image(self, client: TestClient) -> None:
        response = client.post(
            "/upload",
            files={"file": ("broken.png", BytesIO(b"\x89PNG broken"), "image/png")},
        )

        assert response.status_code == 400

    def test_queue_failure_rolls_back_upload(
        self, client: TestClient, messaging: InMemoryMessaging, temp_storage_dir: Path
    ) -> None:
        settings = get_settings()
        messaging.fail_publish.add(settings.ingest_queue)

        response = client.post(
            "/upload",
            files={"file": ("photo.png", make_test_image(), "image/png")},
        )

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "QUEUE_UNAVAILABLE"
        bucket_dir = temp_storage_dir / settings.upload_bucket
        assert not any(p.is_file() for p in bucket_dir.rglob("*"))


class TestUploadDelete:
    def test_delete_emits_deletion_notification(
        self, client: TestClient, messaging: InMemoryMessaging
    ) -> None:
        settings = get_settings()
        name = client.post(
            "/upload",
            files={"file": ("photo.png", make_test_image(), "image/png")},
        ).json()["name"]

        response = client.delete(f"/upload/{name}")

        assert response.status_code == 204
        assert messaging.messages(settings.ingest_queue)[-1] == {
            "bucket": settings.upload_bucket,
            "name": name,
            "resourceState": "not_exists",
        }

    def test_delete_missing_returns_404(
        self, client: TestClient, messaging: InMemoryMessaging
    ) -> None:
        response = client.delete("/upload/upload_00000000/missing.png")

        assert response.status_code == 404
        assert messaging.published == []


class TestUploadStorageFailures:
    def test_delete_failure_returns_503(
        self, client: TestClient, messaging: InMemoryMessaging
    ) -> None:
        name = client.post(
            "/upload",
            files={"file": ("photo.png", make_test_image(), "image/png")},
        ).json()["name"]
        messaging.published.clear()

        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            response = client.delete(f"/upload/{name}")

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "STORAGE_UNAVAILABLE"
        assert messaging.published == []

    def test_rollback_failure_keeps_queue_error(
        self, client: TestClient, messaging: InMemoryMessaging
    ) -> None:
        messaging.fail_publish.add(get_settings().ingest_queue)

        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            response = client.post(
                "/upload",
                files={"file": ("photo.png", make_test_image(), "image/png")},
            )

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "QUEUE_UNAVAILABLE"
