import re


class ResourceState:
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class SaveName:
    SUFFIX = "_to_{lang}.txt"
    EXTENSION_PATTERN = re.compile(r"\.[^/.]+\Z")


class TTL:
    CELERY_RESULT = 60 * 60 * 2  # 2시간


class Limits:
    MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB
    UPLOAD_CHUNK_SIZE = 1024 * 1024  # 1MB


class TaskName:
    PROCESS_IMAGE = "ocr.process_image"
    TRANSLATE_TEXT = "ocr.translate_text"
    SAVE_RESULT = "ocr.save_result"
