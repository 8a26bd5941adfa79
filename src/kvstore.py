"""File-backed key/value store for opaque byte blobs."""

import asyncio
import base64
import json
import os
from pathlib import Path

STORE_FILE = "kv_store.json"


class FileKVStore:
    """All keys live in one JSON file; values are stored base64-encoded.

    Writes go to a temp file that replaces the store, so a crash never
    leaves a half-written store behind.
    """

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / STORE_FILE
        self.lock = asyncio.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8") or "{}")

    def _flush(self, data: dict[str, str]):
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self.path)

    async def get(self, key: str) -> bytes | None:
        async with self.lock:
            encoded = self._load().get(key)
        if encoded is None:
            return None
        return base64.b64decode(encoded)

    async def set(self, key: str, value: bytes):
        async with self.lock:
            data = self._load()
            data[key] = base64.b64encode(value).decode("ascii")
            self._flush(data)
