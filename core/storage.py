"""Key-value persistence for saved stocks, recent lookups and prompt history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import tempfile
import threading
import time
from typing import Any, Callable, Protocol

from core.models import StockRecord

SAVED_STOCKS_KEY = "savedStocks"
RECENT_STOCKS_KEY = "recentStocks"

logger = logging.getLogger("stocksight.storage")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            value = self._data.get(key)
        return json.loads(value) if value is not None else None

    def put(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileStore:
    """Store backed by one JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(temp_name, self.path)
        except BaseException:
            if os.path.exists(temp_name):
                os.remove(temp_name)
            raise

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._read_all().get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)


def _load_records(store: KeyValueStore, key: str) -> list[StockRecord]:
    payload = store.get(key) or []
    records: list[StockRecord] = []
    for item in payload:
        try:
            records.append(StockRecord.from_dict(item))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping malformed %s entry: %s", key, exc)
    return records


class SavedStockRepository:
    """Saved stocks keyed by symbol, persisted under `savedStocks`."""

    def __init__(
        self,
        store: KeyValueStore,
        latency_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._latency_seconds = max(0.0, latency_seconds)
        self._sleep = sleep
        self._lock = threading.Lock()

    def _delay(self) -> None:
        if self._latency_seconds:
            self._sleep(self._latency_seconds)

    def save(self, stock: StockRecord) -> bool:
        """Insert or replace by symbol; False if the store failed."""
        try:
            self._delay()
            with self._lock:
                saved = _load_records(self._store, SAVED_STOCKS_KEY)
                for index, existing in enumerate(saved):
                    if existing.symbol == stock.symbol:
                        saved[index] = stock
                        break
                else:
                    saved.append(stock)
                self._store.put(SAVED_STOCKS_KEY, [item.to_dict() for item in saved])
            return True
        except Exception:
            logger.exception("Error saving stock data for %s", stock.symbol)
            return False

    def list(self) -> list[StockRecord]:
        try:
            self._delay()
            return _load_records(self._store, SAVED_STOCKS_KEY)
        except Exception:
            logger.exception("Error getting saved stocks")
            return []

    def search(self, query: str) -> list[StockRecord]:
        """Case-insensitive match on symbol or name; blank query returns all."""
        stocks = self.list()
        needle = (query or "").strip().lower()
        if not needle:
            return stocks
        return [stock for stock in stocks if needle in stock.symbol.lower() or needle in stock.name.lower()]

    def remove(self, symbol: str) -> bool:
        """Drop a saved symbol; False when it was not saved or the store failed."""
        normalized = symbol.strip().upper()
        try:
            with self._lock:
                saved = _load_records(self._store, SAVED_STOCKS_KEY)
                kept = [stock for stock in saved if stock.symbol != normalized]
                if len(kept) == len(saved):
                    return False
                self._store.put(SAVED_STOCKS_KEY, [item.to_dict() for item in kept])
            return True
        except Exception:
            logger.exception("Error removing saved stock %s", normalized)
            return False

    def clear(self) -> bool:
        try:
            self._store.delete(SAVED_STOCKS_KEY)
            return True
        except Exception:
            logger.exception("Error clearing saved stocks")
            return False


class RecentStockCache:
    """The last fetched batch of stocks, replaced on every lookup."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def replace(self, stocks: list[StockRecord]) -> None:
        self._store.put(RECENT_STOCKS_KEY, [stock.to_dict() for stock in stocks])

    def list(self) -> list[StockRecord]:
        return _load_records(self._store, RECENT_STOCKS_KEY)

    def clear(self) -> bool:
        try:
            self._store.delete(RECENT_STOCKS_KEY)
            return True
        except Exception:
            logger.exception("Error clearing recent stocks")
            return False


def analysis_stocks(recent: RecentStockCache, saved: SavedStockRepository) -> list[StockRecord]:
    """Stocks to analyze: the recent batch if any, otherwise the saved list."""
    stocks = recent.list()
    if stocks:
        return stocks
    return saved.list()


def clear_local_data(saved: SavedStockRepository, recent: RecentStockCache) -> bool:
    """Remove saved and recent stocks; False if either could not be cleared."""
    cleared = saved.clear()
    cleared = recent.clear() and cleared
    if cleared:
        logger.info("All locally saved data has been cleared")
    return cleared


@dataclass(frozen=True)
class PromptExchange:
    prompt: str
    response: str


class PromptHistory:
    """Most recent prompt/response pairs, newest first."""

    def __init__(self, limit: int = 5) -> None:
        self._items: deque[PromptExchange] = deque(maxlen=limit)
        self._lock = threading.Lock()

    def add(self, prompt: str, response: str) -> None:
        with self._lock:
            self._items.appendleft(PromptExchange(prompt=prompt, response=response))

    def items(self) -> list[PromptExchange]:
        with self._lock:
            return list(self._items)
