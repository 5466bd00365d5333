"""
Commit Multi-Store

A set of named key-value stores sharing one sqlite database. Writes stay
in the open transaction until commit(), which bumps the version and
records a hash over every mounted store's contents.
"""

import logging
import sqlite3
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..protocol.crypto.hash import sha256
from ..protocol.types.common import StoreError

DEFAULT_COMMIT_KV_STORE_CACHE_SIZE = 1000


@dataclass(frozen=True)
class CommitID:
    version: int
    hash: bytes

    def is_zero(self) -> bool:
        return self.version == 0 and not self.hash


def _framed(data: bytes) -> bytes:
    return len(data).to_bytes(4, "big") + data


class KVStore:
    """One mounted store. Keys and values are bytes; iteration is in key order."""

    def __init__(self, ms: "CommitMultiStore", name: str):
        self._ms = ms
        self.name = name

    def get(self, key: bytes) -> Optional[bytes]:
        return self._ms._get(self.name, key)

    def has(self, key: bytes) -> bool:
        return self.get(key) is not None

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise StoreError("key must not be empty")
        if value is None:
            raise StoreError("value must not be None")
        self._ms._set(self.name, key, value)

    def delete(self, key: bytes) -> None:
        self._ms._delete(self.name, key)

    def iterate(self, prefix: bytes = b"") -> Iterator[Tuple[bytes, bytes]]:
        return iter(self._ms._items(self.name, prefix))

    def hash(self) -> bytes:
        h = b"".join(_framed(k) + _framed(v) for k, v in self.iterate())
        return sha256(h)


class CommitKVStoreCache:
    """Write-through LRU cache in front of a KVStore."""

    def __init__(self, parent: KVStore, size: int):
        self._parent = parent
        self._size = size
        self._cache: "OrderedDict[bytes, Optional[bytes]]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._parent.name

    @property
    def parent(self) -> KVStore:
        return self._parent

    def _remember(self, key: bytes, value: Optional[bytes]) -> None:
        self._cache[key] = value
        self._cache.move_to_end(key)
        while len(self._cache) > self._size:
            self._cache.popitem(last=False)

    def get(self, key: bytes) -> Optional[bytes]:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]
        value = self._parent.get(key)
        with self._lock:
            self._remember(key, value)
        return value

    def has(self, key: bytes) -> bool:
        return self.get(key) is not None

    def set(self, key: bytes, value: bytes) -> None:
        self._parent.set(key, value)
        with self._lock:
            self._remember(key, value)

    def delete(self, key: bytes) -> None:
        self._parent.delete(key)
        with self._lock:
            self._cache.pop(key, None)

    def iterate(self, prefix: bytes = b"") -> Iterator[Tuple[bytes, bytes]]:
        return self._parent.iterate(prefix)

    def hash(self) -> bytes:
        return self._parent.hash()

    def __len__(self) -> int:
        return len(self._cache)

    def reset(self) -> None:
        with self._lock:
            self._cache.clear()


class CommitKVStoreCacheManager:
    """Keeps one cache per store name across commits."""

    def __init__(self, size: int = DEFAULT_COMMIT_KV_STORE_CACHE_SIZE):
        if size < 1:
            raise StoreError(f"cache size must be positive, got {size}")
        self.size = size
        self._caches: Dict[str, CommitKVStoreCache] = {}

    def get_store_cache(self, store: KVStore) -> CommitKVStoreCache:
        if store.name not in self._caches:
            self._caches[store.name] = CommitKVStoreCache(store, self.size)
        return self._caches[store.name]

    def unwrap(self, name: str) -> Optional[KVStore]:
        cache = self._caches.get(name)
        return cache.parent if cache is not None else None

    def reset(self) -> None:
        for cache in self._caches.values():
            cache.reset()


class CommitMultiStore:

    def __init__(self, db_path: str, logger: Optional[logging.Logger] = None):
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.cursor = self.conn.cursor()
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._stores: Dict[str, KVStore] = {}
        self._cache_manager: Optional[CommitKVStoreCacheManager] = None
        self._init_db()
        self._last_commit_id = self._load_last_commit()

    def _init_db(self):
        with self._lock:
            # Key-value pairs of every mounted store
            self.cursor.execute('''
                CREATE TABLE IF NOT EXISTS kv (
                    store TEXT,
                    key BLOB,
                    value BLOB,
                    PRIMARY KEY (store, key)
                )
            ''')
            self.cursor.execute('''
                CREATE TABLE IF NOT EXISTS commits (
                    version INTEGER PRIMARY KEY,
                    hash BLOB
                )
            ''')
            self.conn.commit()

    def _load_last_commit(self) -> CommitID:
        with self._lock:
            self.cursor.execute('SELECT version, hash FROM commits ORDER BY version DESC LIMIT 1')
            row = self.cursor.fetchone()
        return CommitID(version=row[0], hash=bytes(row[1])) if row else CommitID(version=0, hash=b"")

    def mount_store(self, name: str) -> None:
        if not name:
            raise StoreError("store name must not be empty")
        if name in self._stores:
            raise StoreError(f"store {name!r} already mounted")
        self._stores[name] = KVStore(self, name)
        self.logger.debug(f"Mounted store {name}")

    def set_inter_block_cache(self, manager: CommitKVStoreCacheManager) -> None:
        self._cache_manager = manager

    def get_kv_store(self, name: str):
        store = self._stores.get(name)
        if store is None:
            raise StoreError(f"store {name!r} is not mounted")
        if self._cache_manager is not None:
            return self._cache_manager.get_store_cache(store)
        return store

    @property
    def store_names(self) -> List[str]:
        return sorted(self._stores)

    def last_commit_id(self) -> CommitID:
        return self._last_commit_id

    def working_hash(self) -> bytes:
        """Root hash over the mounted stores as they are now."""
        parts = b"".join(
            _framed(name.encode()) + _framed(self._stores[name].hash()) for name in self.store_names
        )
        return sha256(parts)

    def commit(self) -> CommitID:
        root = self.working_hash()
        version = self._last_commit_id.version + 1
        with self._lock:
            self.cursor.execute('INSERT INTO commits (version, hash) VALUES (?, ?)', (version, root))
            self.conn.commit()
        self._last_commit_id = CommitID(version=version, hash=root)
        self.logger.info(f"Committed version {version}, hash {root.hex()[:16]}...")
        return self._last_commit_id

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    # --- Storage backend ---
    def _get(self, store: str, key: bytes) -> Optional[bytes]:
        with self._lock:
            self.cursor.execute('SELECT value FROM kv WHERE store = ? AND key = ?', (store, key))
            row = self.cursor.fetchone()
            return bytes(row[0]) if row else None

    def _set(self, store: str, key: bytes, value: bytes) -> None:
        with self._lock:
            self.cursor.execute('INSERT OR REPLACE INTO kv (store, key, value) VALUES (?, ?, ?)', (store, key, value))

    def _delete(self, store: str, key: bytes) -> None:
        with self._lock:
            self.cursor.execute('DELETE FROM kv WHERE store = ? AND key = ?', (store, key))

    def _items(self, store: str, prefix: bytes) -> List[Tuple[bytes, bytes]]:
        with self._lock:
            if not prefix:
                self.cursor.execute('SELECT key, value FROM kv WHERE store = ? ORDER BY key', (store,))
                return [(bytes(k), bytes(v)) for k, v in self.cursor.fetchall()]
            self.cursor.execute(
                'SELECT key, value FROM kv WHERE store = ? AND substr(key, 1, ?) = ? ORDER BY key',
                (store, len(prefix), prefix),
            )
            return [(bytes(k), bytes(v)) for k, v in self.cursor.fetchall()]


def new_commit_multi_store(db_path: str, logger: Optional[logging.Logger] = None) -> CommitMultiStore:
    return CommitMultiStore(db_path, logger)


def new_commit_kv_store_cache_manager(size: int = DEFAULT_COMMIT_KV_STORE_CACHE_SIZE) -> CommitKVStoreCacheManager:
    return CommitKVStoreCacheManager(size)
