from __future__ import annotations

from typing import Any, Protocol


class ArtifactStore(Protocol):
    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None: ...


class S3ArtifactStore:
    """Write artifacts to S3 with a plain PutObject."""

    def __init__(self, region: str, client: Any | None = None) -> None:
        if client is None:
            import boto3  # lazy import

            client = boto3.client("s3", region_name=region)
        self._client = client

    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self._client.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)


class InMemoryArtifactStore:
    """Keeps artifacts in a dict; used for local runs without AWS credentials."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}

    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self.objects[(bucket, key)] = (body, content_type)


def get_store(region: str, backend: str = "s3") -> ArtifactStore:
    if backend == "inmemory":
        return InMemoryArtifactStore()
    return S3ArtifactStore(region)
