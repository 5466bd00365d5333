# MIT License
# Copyright (c) 2025 Hashborn

"""
Module State Map

Maps a module name to that module's serialized genesis state. The map is
immutable: every write returns a new map, so each pipeline step works on
a snapshot and hands the next step a new one.
"""

import json
from typing import Any, Dict, Iterator, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..protocol.codec import canonical_json
from ..protocol.types.common import MalformedStateError

M = TypeVar("M", bound=BaseModel)


class ModuleStateMap(Mapping[str, bytes]):

    def __init__(self, modules: Optional[Mapping[str, bytes]] = None):
        self._modules: Dict[str, bytes] = dict(modules or {})

    def __getitem__(self, name: str) -> bytes:
        return self._modules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleStateMap({sorted(self._modules)})"

    def set_module(self, name: str, state: Any) -> "ModuleStateMap":
        """Overwrites a module's state unconditionally."""
        try:
            blob = canonical_json(state)
        except (TypeError, ValueError) as e:
            raise MalformedStateError(f"{name} genesis state is not JSON-encodable: {e}") from e
        modules = dict(self._modules)
        modules[name] = blob
        return ModuleStateMap(modules)

    def set_raw(self, name: str, blob: bytes) -> "ModuleStateMap":
        """Stores an already serialized blob as-is."""
        modules = dict(self._modules)
        modules[name] = bytes(blob)
        return ModuleStateMap(modules)

    def get_module(self, name: str, schema: Type[M]) -> M:
        """
        Returns the module's last written state, parsed against its schema.

        A module that was never written yields the schema's zero value, so
        callers can append to e.g. bank balances before bank is configured.
        """
        blob = self._modules.get(name)
        if blob is None:
            return schema()
        try:
            return schema.model_validate_json(blob)
        except PydanticValidationError as e:
            raise MalformedStateError(f"malformed {name} genesis state: {e}") from e

    def to_json(self) -> Dict[str, Any]:
        decoded = {}
        for name, blob in self._modules.items():
            try:
                decoded[name] = json.loads(blob)
            except json.JSONDecodeError as e:
                raise MalformedStateError(f"{name} genesis state is not valid JSON: {e}") from e
        return decoded
