"""Mirror externally hosted pronunciation files into local storage."""

import asyncio
import hashlib
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlparse

import httpx

from lexigraph.config import settings

logger = logging.getLogger(__name__)

SUPPORTED_CONTENT_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/mp3",
        "audio/wav",
        "audio/ogg",
        "audio/x-wav",
        "audio/x-mpeg",
    }
)

CONTENT_TYPE_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/x-mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
}

USER_AGENT = "Mozilla/5.0 (compatible; lexigraph/1.0)"


@dataclass
class DownloadResult:
    """Outcome of mirroring one audio URL."""

    success: bool
    original_url: str
    local_url: str | None = None
    error: str | None = None
    skipped: bool = False
    reason: str | None = None

    @property
    def stored_url(self) -> str:
        """URL to persist: the local copy when there is one, else the original."""
        return self.local_url if self.success and self.local_url else self.original_url


def storage_name(url: str, content_type: str | None = None) -> str:
    """File name for a mirrored URL: SHA-256 of the URL plus an extension."""
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
    ext = PurePosixPath(urlparse(url).path).suffix.lower()
    if not ext and content_type:
        ext = CONTENT_TYPE_EXTENSIONS.get(content_type, "")
    return f"{digest}{ext or '.mp3'}"


class AudioDownloader:
    """Download audio over HTTP and store it under ``settings.audio_dir``.

    Failures are reported in the returned ``DownloadResult``; nothing raises.
    """

    def __init__(
        self,
        audio_dir: Path | None = None,
        timeout: float | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.audio_dir = audio_dir or settings.audio_dir
        self.timeout = timeout or settings.audio_download_timeout
        self.max_bytes = max_bytes or settings.audio_max_bytes

    def is_stored(self, url: str) -> bool:
        """True for URLs that already point into local storage."""
        if url.startswith(str(self.audio_dir)):
            return True
        return urlparse(url).scheme not in ("http", "https")

    async def download_and_store(
        self, url: str, metadata: Mapping[str, Any] | None = None
    ) -> DownloadResult:
        """
        Download one audio file unless it is already stored.

        Args:
            url: Remote URL of the audio file
            metadata: Optional context (word, language) used in log messages

        Returns:
            DownloadResult describing the stored copy or the failure
        """
        label = f" ({metadata.get('word')})" if metadata and metadata.get("word") else ""

        if self.is_stored(url):
            logger.debug(f"Audio already stored, skipping download: {url}")
            return DownloadResult(
                success=True,
                original_url=url,
                local_url=url,
                skipped=True,
                reason="Already in local storage",
            )

        logger.info(f"Downloading audio{label}: {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning(f"Audio download timed out after {self.timeout}s: {url}")
            return DownloadResult(success=False, original_url=url, error="Download timeout")
        except httpx.HTTPStatusError as e:
            logger.error(f"Audio download failed with HTTP {e.response.status_code}: {url}")
            return DownloadResult(
                success=False, original_url=url, error=f"HTTP {e.response.status_code}"
            )
        except httpx.ConnectError:
            logger.error(f"Cannot connect to audio host: {url}")
            return DownloadResult(success=False, original_url=url, error="Connection failed")
        except httpx.HTTPError as e:
            logger.error(f"Audio download failed for {url}: {e}")
            return DownloadResult(success=False, original_url=url, error=str(e))

        content_type = (response.headers.get("content-type") or "").split(";")[0].strip().lower()
        if content_type and content_type not in SUPPORTED_CONTENT_TYPES:
            logger.warning(f"Unsupported content type {content_type} for {url}")
            return DownloadResult(
                success=False, original_url=url, error=f"Unsupported content type: {content_type}"
            )

        content = response.content
        if len(content) > self.max_bytes:
            logger.warning(f"Audio file too large ({len(content)} bytes): {url}")
            return DownloadResult(
                success=False, original_url=url, error=f"File too large: {len(content)} bytes"
            )

        try:
            self.audio_dir.mkdir(parents=True, exist_ok=True)
            file_path = self.audio_dir / storage_name(url, content_type or None)
            file_path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to store audio from {url}: {e}")
            return DownloadResult(success=False, original_url=url, error=f"Storage failed: {e}")

        logger.info(f"Stored audio {url} -> {file_path}")
        return DownloadResult(success=True, original_url=url, local_url=str(file_path))

    async def download_many(
        self, urls: Iterable[str], metadata: Mapping[str, Any] | None = None
    ) -> dict[str, DownloadResult]:
        """Download distinct URLs concurrently, keyed by original URL."""
        unique = list(dict.fromkeys(u for u in urls if u))
        if not unique:
            return {}
        results = await asyncio.gather(
            *(self.download_and_store(url, metadata) for url in unique)
        )
        successful = sum(1 for r in results if r.success and not r.skipped)
        skipped = sum(1 for r in results if r.skipped)
        failed = sum(1 for r in results if not r.success)
        logger.info(
            f"Audio downloads finished: {successful} stored, {skipped} skipped, {failed} failed"
        )
        return dict(zip(unique, results, strict=True))
