"""
Per-invocation view of one configuration block and its state.
"""
import copy
from typing import Any, Dict, Optional

from blockmap.schema import Block


class ResourceData:
    """
    Holds the decoded configuration of a block together with the state the
    CRUD functions write back.

    ``get`` reads the configuration first and falls back to the state, so
    the same accessor works for plan-time reads and for imports where no
    configuration exists.
    """

    def __init__(
        self,
        schema: Block,
        config: Optional[Dict[str, Any]] = None,
        state: Optional[Dict[str, Any]] = None,
        id: str = "",
    ) -> None:
        self.schema = schema
        self._config = schema.decode(config) if config is not None else None
        self._state: Dict[str, Any] = copy.deepcopy(state) if state else {}
        self._id = id

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value or ""

    @property
    def has_config(self) -> bool:
        return self._config is not None

    def get(self, key: str) -> Any:
        if key not in self.schema:
            raise KeyError(f"unknown attribute {key!r}")
        if self._config is not None and key in self._config:
            return self._config[key]
        if key in self._state:
            return self._state[key]
        return self.schema[key].zero()

    def set(self, key: str, value: Any) -> None:
        if key not in self.schema:
            raise KeyError(f"unknown attribute {key!r}")
        self._state[key] = value

    def previous(self, key: str) -> Any:
        """The recorded state value, ignoring configuration."""
        if key not in self.schema:
            raise KeyError(f"unknown attribute {key!r}")
        return self._state.get(key, self.schema[key].zero())

    def has_change(self, key: str) -> bool:
        """True when the configuration differs from the recorded state."""
        if self._config is None or key not in self._config:
            return False
        return self._config[key] != self._state.get(key, self.schema[key].zero())

    def to_state(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        if self._config is not None:
            merged.update(self._config)
        merged.update(self._state)
        if self._id:
            merged["id"] = self._id
        return merged
