"""Fetch icon and background assets by logical path."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

import aiohttp

from .utils import float_from_env, path_from_env

logger = logging.getLogger("tknotation.assets")

PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parent

DEFAULT_ASSET_ROOT = Path("images")
DEFAULT_TIMEOUT = 10.0

AssetFetcher = Callable[[str], Awaitable[Optional[bytes]]]


class AssetStore:
    """
    Byte-level loader for ``category/name.png`` asset paths.

    Reads from ``base_url`` over HTTP when one is configured, otherwise from
    files under ``root``. Successful reads are memoized per store.
    """

    def __init__(
        self,
        root: Optional[Path] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if root is not None and not root.is_absolute():
            root = BASE_DIR / root
        self.root = root.resolve() if root is not None else None
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self._cache: Dict[str, bytes] = {}

    @classmethod
    def from_env(cls) -> "AssetStore":
        base_url = os.getenv("TKN_ASSET_BASE_URL", "").strip() or None
        root = path_from_env("TKN_ASSET_ROOT") or DEFAULT_ASSET_ROOT
        timeout = max(0.1, float_from_env("TKN_ASSET_TIMEOUT", DEFAULT_TIMEOUT))
        return cls(root=root, base_url=base_url, timeout=timeout)

    async def __call__(self, logical_path: str) -> Optional[bytes]:
        return await self.fetch(logical_path)

    async def fetch(self, logical_path: str) -> Optional[bytes]:
        logical_path = logical_path.lstrip("/")
        if not logical_path:
            return None
        cached = self._cache.get(logical_path)
        if cached is not None:
            return cached
        if self.base_url:
            data = await self._fetch_remote(logical_path)
        else:
            data = self._read_local(logical_path)
        if data:
            self._cache[logical_path] = data
        return data

    async def _fetch_remote(self, logical_path: str) -> Optional[bytes]:
        url = f"{self.base_url}/{logical_path}"
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.timeout)) as resp:
                    if resp.status != 200:
                        logger.warning("Asset fetch failed (%s): %s", resp.status, url)
                        return None
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Asset fetch error for %s: %s", url, exc)
            return None

    def _read_local(self, logical_path: str) -> Optional[bytes]:
        if self.root is None:
            logger.warning("No asset root configured for %s", logical_path)
            return None
        local_path = (self.root / logical_path).resolve()
        if self.root not in local_path.parents:
            logger.warning("Refusing asset path outside %s: %s", self.root, logical_path)
            return None
        if not local_path.exists():
            logger.warning("Asset file not found: %s", local_path)
            return None
        try:
            return local_path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to read asset file %s: %s", local_path, exc)
            return None


__all__ = [
    "AssetFetcher",
    "AssetStore",
    "DEFAULT_ASSET_ROOT",
]
