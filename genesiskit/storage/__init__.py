# MIT License
# Copyright (c) 2025 Hashborn

from .store import (
    CommitID, CommitKVStoreCacheManager, CommitMultiStore, KVStore, new_commit_kv_store_cache_manager,
    new_commit_multi_store,
)

__all__ = [
    "CommitID", "CommitKVStoreCacheManager", "CommitMultiStore", "KVStore",
    "new_commit_kv_store_cache_manager", "new_commit_multi_store",
]
