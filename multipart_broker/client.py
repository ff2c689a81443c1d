"""Async client that uploads a file through the broker in parts."""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, Union

import httpx
import structlog

from .utils.constants import DEFAULT_CHUNK_SIZE, MAX_PART_NUMBER

# Server settings are not loaded here, the client runs without them
logger = structlog.get_logger(__name__)

# (offset, length) of one part within the source
PartRange = Tuple[int, int]
PartReader = Callable[[int, int], Awaitable[bytes]]


class UploadFailedError(Exception):
    """The upload could not be finished and was aborted."""

    def __init__(self, message: str, upload_id: str, key: str):
        super().__init__(message)
        self.upload_id = upload_id
        self.key = key


def part_ranges(size: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[PartRange]:
    """Split ``size`` bytes into parts of at most ``chunk_size`` bytes."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    ranges = [
        (offset, min(chunk_size, size - offset)) for offset in range(0, size, chunk_size)
    ]
    # An empty file is still uploaded as a single empty part
    return ranges or [(0, 0)]


def split_into_chunks(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[PartRange]:
    """Byte ranges of the parts of a file on disk. Nothing is read yet."""
    return part_ranges(Path(path).stat().st_size, chunk_size)


def read_file_range(path: Union[str, Path], offset: int, length: int) -> bytes:
    """Read a single part from disk."""
    with open(path, "rb") as f:
        f.seek(offset)
        return f.read(length)


class UploadClient:
    """Upload files through the broker's ``/upload`` endpoints.

    Parts are PUT straight to the presigned URLs, concurrently, then the
    upload is completed with the returned ETags. If anything fails after the
    upload was opened, outstanding parts are cancelled and the upload is
    aborted.
    """

    def __init__(
        self,
        base_url: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_concurrency: int = 4,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        storage_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.chunk_size = chunk_size
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self.transport = transport
        self.storage_transport = storage_transport

    async def upload(self, path: Union[str, Path]) -> str:
        """
        Upload a file from disk, reading one part at a time.
        Returns:
            Object key the file was stored under
        """
        path = Path(path)

        async def read_part(offset: int, length: int) -> bytes:
            return await asyncio.to_thread(read_file_range, path, offset, length)

        return await self._upload(path.name, split_into_chunks(path, self.chunk_size), read_part)

    async def upload_bytes(self, filename: str, data: bytes) -> str:
        """Upload in-memory content under ``filename``."""
        view = memoryview(data)

        async def read_part(offset: int, length: int) -> bytes:
            return bytes(view[offset:offset + length])

        return await self._upload(filename, part_ranges(len(data), self.chunk_size), read_part)

    async def _upload(self, filename: str, ranges: List[PartRange], read_part: PartReader) -> str:
        if len(ranges) > MAX_PART_NUMBER:
            raise ValueError(
                f"{len(ranges)} parts exceed the limit of {MAX_PART_NUMBER}; use a larger chunk size"
            )

        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as api, httpx.AsyncClient(
            timeout=self.timeout, transport=self.storage_transport
        ) as storage:
            session = await self._request_urls(api, filename, len(ranges))
            key = session["filename"]
            upload_id = session["uploadId"]
            urls = {int(n): url for n, url in session["preSignedUrls"].items()}

            try:
                etags = await self._put_parts(storage, urls, ranges, read_part)
                return await self._complete(api, upload_id, key, etags)
            except Exception as e:
                logger.error("Upload failed, aborting", key=key, upload_id=upload_id, error=str(e))
                await self._abort(api, upload_id, key)
                raise UploadFailedError(str(e) or type(e).__name__, upload_id=upload_id, key=key) from e

    async def _request_urls(self, api: httpx.AsyncClient, filename: str, parts: int) -> Dict:
        response = await api.post("/upload", json={"filename": filename, "parts": parts})
        response.raise_for_status()
        return response.json()

    async def _put_parts(
        self,
        storage: httpx.AsyncClient,
        urls: Dict[int, str],
        ranges: List[PartRange],
        read_part: PartReader,
    ) -> Dict[int, str]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def put_part(part_number: int) -> str:
            async with semaphore:
                offset, length = ranges[part_number - 1]
                content = await read_part(offset, length)
                response = await storage.put(urls[part_number], content=content)
                response.raise_for_status()
                etag = response.headers.get("etag")
                if not etag:
                    raise ValueError(f"Part {part_number} response carried no ETag")
                logger.debug("Uploaded part", part_number=part_number)
                return etag

        numbers = sorted(urls)
        tasks = [asyncio.create_task(put_part(n)) for n in numbers]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            # No part may still be uploading once this returns
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        failed = [t for t in tasks if not t.cancelled() and t.exception() is not None]
        if failed:
            raise failed[0].exception()
        return {n: task.result() for n, task in zip(numbers, tasks)}

    async def _complete(
        self, api: httpx.AsyncClient, upload_id: str, key: str, etags: Dict[int, str]
    ) -> str:
        response = await api.post(
            f"/upload/{upload_id}/complete",
            json={
                "filename": key,
                "completedParts": [
                    {"eTag": etag, "partNumber": number} for number, etag in etags.items()
                ],
            },
        )
        response.raise_for_status()
        return response.json()["message"]

    async def _abort(self, api: httpx.AsyncClient, upload_id: str, key: str) -> None:
        """Abort the upload. A failed abort is logged, the original failure wins."""
        try:
            response = await api.post(f"/upload/{upload_id}/abort", json={"filename": key})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Abort failed", key=key, upload_id=upload_id, error=str(e))
