"""Caller-owned result cache keyed by content hash.

The engine never caches; a service that wants to reuse results across
requests creates a ResultCache and passes it to ``process_cached``.
"""

from __future__ import annotations

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Optional

from loguru import logger

from .config import ProcessorConfig
from .diff_processing.engine import DiffProcessingEngine
from .diff_processing.models import ProcessedResult


def content_key(raw: str, config: ProcessorConfig) -> str:
    """SHA-256 over the config values and the raw diff text."""
    digest = hashlib.sha256()
    digest.update(json.dumps(config.to_dict(), sort_keys=True).encode("utf-8"))
    digest.update(b"\0")
    digest.update(raw.encode("utf-8", errors="replace"))
    return digest.hexdigest()


class ResultCache:
    """Bounded LRU map from content key to ProcessedResult."""

    def __init__(self, max_entries: int = 128):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, ProcessedResult]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[ProcessedResult]:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return result

    def put(self, key: str, result: ProcessedResult) -> None:
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


def process_cached(engine: DiffProcessingEngine, raw: str, cache: ResultCache) -> ProcessedResult:
    """Process ``raw`` through ``engine``, reusing a cached result when present."""
    key = content_key(raw, engine.config)
    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"Result cache hit for {key[:12]}")
        return cached

    result = engine.process(raw)
    cache.put(key, result)
    return result
