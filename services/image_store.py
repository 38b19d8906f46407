"""Short-lived image storage backing the `/temp` static route.

Images arrive as base64 payloads (optionally data-URL prefixed), are written
to the temp directory under a time-stamped name, and are reachable at
`<public_base_url>/temp/<filename>`. A periodic sweep deletes files whose
modification time is older than the retention window. The temp directory is
expected to exist already; the store never creates it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Optional

import aiofiles

from models.results import StoredImage
from utils.media_validation import decode_base64_image, extension_for, split_data_url

LOGGER = logging.getLogger(__name__)

FILENAME_PREFIX = "math-"
STATIC_ROUTE = "/temp"


class ImageStore:
    """Write base64 images to disk and reclaim them after `max_age_seconds`."""

    def __init__(
        self,
        temp_dir: Path | str,
        public_base_url: str,
        *,
        max_age_seconds: int = 3_600,
        prefix: str = FILENAME_PREFIX,
    ) -> None:
        """
        Args:
            temp_dir: Existing directory that holds the stored images.
            public_base_url: Service address prepended to the static route.
            max_age_seconds: Files older than this are removed by `sweep`.
            prefix: Fixed filename prefix.
        """
        self.temp_dir = Path(temp_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_age_seconds = max_age_seconds
        self.prefix = prefix
        self._last_stamp_ns = 0

    def _next_stamp_ns(self) -> int:
        # Strictly increasing within the process, even when the clock does not advance.
        stamp = time.time_ns()
        if stamp <= self._last_stamp_ns:
            stamp = self._last_stamp_ns + 1
        self._last_stamp_ns = stamp
        return stamp

    def _build_filename(self, ext: str) -> str:
        stamp = self._next_stamp_ns()
        millis, remainder = divmod(stamp, 1_000_000)
        return f"{self.prefix}{millis}-{remainder:06d}.{ext}"

    def url_for(self, filename: str) -> str:
        """Return the externally reachable URL for a stored filename."""
        return f"{self.public_base_url}{STATIC_ROUTE}/{filename}"

    async def save_image(self, base64_data: str) -> StoredImage:
        """Decode a base64 payload and write it under a fresh filename.

        Raises:
            ImagePayloadError: If the payload is not valid base64.
            OSError: If the file cannot be written.
        """
        mime_type, payload = split_data_url(base64_data)
        image_bytes = decode_base64_image(payload)

        filename = self._build_filename(extension_for(mime_type))
        filepath = self.temp_dir / filename
        async with aiofiles.open(filepath, "wb") as f:
            await f.write(image_bytes)

        created_at = (await asyncio.to_thread(filepath.stat)).st_mtime
        url = self.url_for(filename)
        LOGGER.info("Stored temporary image %s (%d bytes)", filename, len(image_bytes))
        return StoredImage(filename=filename, filepath=str(filepath), created_at=created_at, url=url)

    async def save(self, base64_data: str) -> str:
        """Persist the image and return its URL."""
        stored = await self.save_image(base64_data)
        return stored.url

    def _sweep_sync(self, now: float) -> int:
        removed = 0
        try:
            entries = list(os.scandir(self.temp_dir))
        except OSError as exc:
            LOGGER.error("Cleanup error: unable to list %s: %s", self.temp_dir, exc)
            return 0

        for entry in entries:
            try:
                if not entry.is_file(follow_symlinks=False) or entry.name.startswith("."):
                    continue
                age = now - entry.stat(follow_symlinks=False).st_mtime
                if age > self.max_age_seconds:
                    os.unlink(entry.path)
                    removed += 1
            except OSError as exc:
                LOGGER.error("Cleanup error: unable to remove %s: %s", entry.path, exc)
        return removed

    async def sweep(self, now: Optional[float] = None) -> int:
        """Delete every file older than the retention window and return how many were removed."""
        current = time.time() if now is None else now
        removed = await asyncio.to_thread(self._sweep_sync, current)
        if removed:
            LOGGER.info("Removed %d expired image(s) from %s", removed, self.temp_dir)
        return removed

    async def run_periodic_sweep(self, interval_seconds: int = 3_600) -> None:
        """
        Sweep at the given interval until cancelled.

        Args:
            interval_seconds: Seconds to sleep between sweeps.
        """
        while True:
            try:
                await asyncio.sleep(interval_seconds)
                await self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                LOGGER.error("Cleanup error: %s", exc)
