# MIT License
# Copyright (c) 2025 Hashborn

"""Canonical JSON shared by module state, sign bytes and the sealed document."""

import json
from typing import Any

from pydantic import BaseModel

def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value

def canonical_json(value: Any) -> bytes:
    """Sorted keys, no whitespace. Same logical content, same bytes."""
    return json.dumps(to_jsonable(value), sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode("utf-8")
