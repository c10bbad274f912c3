from typing import AsyncGenerator, AsyncIterable, Optional, Union

import httpx
from loguru import logger

from academy.core.config import (
    BLOB_ADD_RANDOM_SUFFIX,
    BLOB_API_URL,
    BLOB_API_VERSION,
    BLOB_READ_WRITE_TOKEN,
    BLOB_TIMEOUT_SECONDS,
)
from academy.core.errors import BlobUploadError

BlobBody = Union[bytes, AsyncIterable[bytes]]


class BlobStorage:
    """
    Thin adapter over the object storage HTTP API.
    Every object is written with public read access and the response
    descriptor always carries a `url` that resolves without credentials.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        base_url: str = BLOB_API_URL,
        api_version: str = BLOB_API_VERSION,
        add_random_suffix: bool = BLOB_ADD_RANDOM_SUFFIX,
    ):
        self.client = client
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.add_random_suffix = add_random_suffix

    def _headers(self, content_type: Optional[str]) -> dict:
        headers = {
            "authorization": f"Bearer {self.token}",
            "x-api-version": self.api_version,
            "x-vercel-blob-access": "public",
            "x-add-random-suffix": "1" if self.add_random_suffix else "0",
        }
        if content_type:
            headers["x-content-type"] = content_type
        return headers

    async def put(self, pathname: str, body: BlobBody, content_type: Optional[str] = None) -> dict:
        if not self.token:
            raise BlobUploadError("Blob storage token is not configured")
        if not pathname:
            raise BlobUploadError("A pathname is required")

        try:
            response = await self.client.put(
                f"{self.base_url}/",
                params={"pathname": pathname},
                content=body,
                headers=self._headers(content_type),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BlobUploadError(
                f"Blob storage returned {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise BlobUploadError(f"Blob storage request failed: {e}") from e

        try:
            descriptor = response.json()
        except ValueError as e:
            raise BlobUploadError("Blob storage returned a non-JSON response") from e
        if not isinstance(descriptor, dict) or not descriptor.get("url"):
            raise BlobUploadError("Blob storage response has no url")

        logger.info("Stored blob {} at {}", pathname, descriptor["url"])
        return descriptor


async def get_blob_storage() -> AsyncGenerator[BlobStorage, None]:
    async with httpx.AsyncClient(timeout=BLOB_TIMEOUT_SECONDS) as client:
        yield BlobStorage(client=client, token=str(BLOB_READ_WRITE_TOKEN))
