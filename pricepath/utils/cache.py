"""File-based parquet caching for collaborator responses."""

import hashlib
import time
from pathlib import Path

import pandas as pd

from pricepath.config import Paths, section


class DataCache:
    """File-based DataFrame cache with TTL support."""

    def __init__(self, category: str = "general", root: Path | None = None):
        self.cache_dir = (root or Paths.DATA_CACHE) / category
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        ttl_config = section("cache").get("ttl_hours", {}) or {}
        self.ttl_seconds = ttl_config.get(category, 24) * 3600

    def _key_path(self, key: str) -> Path:
        hashed = hashlib.md5(key.encode()).hexdigest()
        return self.cache_dir / f"{hashed}.parquet"

    def _fresh(self, path: Path) -> bool:
        if not path.exists():
            return False
        if time.time() - path.stat().st_mtime > self.ttl_seconds:
            path.unlink()
            return False
        return True

    def get_df(self, key: str) -> pd.DataFrame | None:
        """Retrieve cached DataFrame if not expired."""
        path = self._key_path(key)
        if not self._fresh(path):
            return None
        return pd.read_parquet(path)

    def set_df(self, key: str, df: pd.DataFrame) -> None:
        """Store DataFrame as parquet."""
        df.to_parquet(self._key_path(key))
