from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict


@dataclass
class Settings:
    aggregation_url: str = "http://localhost:5000"
    scheduler_url: str = "http://127.0.0.1:8080/api/schedule"
    timeout_seconds: float = 120.0

    cache_namespace: str = "timetableCache"
    cache_ttl_minutes: float = 30.0
    cache_path: str = ".cache/timetables.json"
    cache_quota_bytes: int | None = 5 * 1024 * 1024

    output_dir: str = "outputs"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60


def _project_root() -> Path:
    # ttgrid/config.py -> project root is parents[1]
    return Path(__file__).resolve().parents[1]


def load_settings(project_root: Path | str | None = None) -> Settings:
    """Load settings from configs/ttgrid.toml if present, else defaults.

    Sections: [services] aggregation_url, scheduler_url, timeout_seconds;
    [cache] namespace, ttl_minutes, path, quota_bytes (0 disables the quota);
    [output] dir.
    """
    base = Settings()
    root = _project_root() if project_root is None else Path(project_root)
    cfg = root / "configs" / "ttgrid.toml"
    if not cfg.exists():
        return base
    try:
        data: Dict[str, Any] = tomllib.loads(cfg.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logging.getLogger(__name__).warning(f"Ignoring unreadable {cfg}: {e}")
        return base

    services = data.get("services", {})
    cache = data.get("cache", {})
    output = data.get("output", {})
    quota = cache.get("quota_bytes", base.cache_quota_bytes)
    return Settings(
        aggregation_url=str(services.get("aggregation_url", base.aggregation_url)),
        scheduler_url=str(services.get("scheduler_url", base.scheduler_url)),
        timeout_seconds=float(services.get("timeout_seconds", base.timeout_seconds)),
        cache_namespace=str(cache.get("namespace", base.cache_namespace)),
        cache_ttl_minutes=float(cache.get("ttl_minutes", base.cache_ttl_minutes)),
        cache_path=str(cache.get("path", base.cache_path)),
        cache_quota_bytes=int(quota) if quota else None,
        output_dir=str(output.get("dir", base.output_dir)),
    )
