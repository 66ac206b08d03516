from __future__ import annotations

import errno
import json
from pathlib import Path
from typing import Dict, Protocol


class QuotaExceededError(Exception):
    """The store has no room left for the value being written."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


def cache_key(namespace: str, timetable_id: str) -> str:
    return f"{namespace}_{timetable_id}"


def _size(data: Dict[str, str]) -> int:
    return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())


def _projected(data: Dict[str, str], key: str, value: str) -> int:
    # The previous value stays resident until the new one has been written.
    return _size(data) + len(key.encode("utf-8")) + len(value.encode("utf-8"))


class MemoryStore:
    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        needed = _projected(self.data, key, value)
        if self.quota_bytes is not None and needed > self.quota_bytes:
            raise QuotaExceededError(f"{key}: {needed} > {self.quota_bytes} bytes")
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """All keys in one JSON object on disk, rewritten on every change."""

    def __init__(self, path: Path, quota_bytes: int | None = None):
        self.path = Path(path)
        self.quota_bytes = quota_bytes

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(data), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            if e.errno in (errno.ENOSPC, errno.EDQUOT):
                raise QuotaExceededError(str(e)) from e
            raise

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        needed = _projected(data, key, value)
        if self.quota_bytes is not None and needed > self.quota_bytes:
            raise QuotaExceededError(f"{key}: {needed} > {self.quota_bytes} bytes")
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())
