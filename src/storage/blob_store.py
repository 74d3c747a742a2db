"""원본 이미지 바이트 저장소.

put(data, content_type, filename) -> location
- location은 바로 역참조 가능한 URL 문자열
- 키는 업로드 시각 + 랜덤 접미사 + 파일명이므로 덮어쓰기가 없다
- 실패 시 BlobWriteError ("느리지만 성공"과 구분된다)
"""

import io
import os
import re
import time
import uuid
from typing import Protocol

import urllib3
from loguru import logger
from minio import Minio
from minio.error import MinioException

from core.exceptions import BlobWriteError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class BlobStore(Protocol):
    def put(self, data: bytes, content_type: str, filename: str | None = None) -> str: ...


def make_key(filename: str | None) -> str:
    """업로드 시각(ms) 기반 객체 키를 만든다."""
    name = _UNSAFE_CHARS.sub("_", os.path.basename(filename or "")).strip("._") or "upload"
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{name}"


class LocalBlobStore:
    """로컬 디렉토리에 저장하고 앱의 /blobs 정적 경로로 서빙한다."""

    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url.rstrip("/")

    def put(self, data: bytes, content_type: str, filename: str | None = None) -> str:
        key = make_key(filename)
        path = os.path.join(self.root, key)
        try:
            os.makedirs(self.root, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise BlobWriteError(f"Failed to write blob {key}") from e

        logger.debug(f"Blob stored: {path} ({len(data)} bytes, {content_type})")
        return f"{self.base_url}/{key}"


class MinioBlobStore:
    """S3 호환 오브젝트 스토리지 (MinIO)."""

    PREFIX = "uploads"

    def __init__(self, client: Minio, bucket: str, public_url: str):
        self.client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")

    def ensure_bucket(self) -> None:
        """버킷이 없으면 생성한다. 시작 시 한 번 호출."""
        if self.client.bucket_exists(self.bucket):
            logger.info(f"Bucket already exists: {self.bucket}")
            return
        self.client.make_bucket(self.bucket)
        logger.info(f"Bucket created: {self.bucket}")

    def put(self, data: bytes, content_type: str, filename: str | None = None) -> str:
        object_name = f"{self.PREFIX}/{make_key(filename)}"
        try:
            self.client.put_object(
                self.bucket,
                object_name,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (MinioException, urllib3.exceptions.HTTPError) as e:
            raise BlobWriteError(f"Failed to write blob {object_name}") from e

        logger.debug(f"Blob stored: {self.bucket}/{object_name} ({len(data)} bytes)")
        return f"{self.public_url}/{self.bucket}/{object_name}"
