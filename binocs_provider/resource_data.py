from __future__ import annotations

from typing import Any, Mapping

from binocs_provider.schema import ResourceSchema


class ResourceData:
    """Desired config and observed state for one resource instance.

    ``config`` is what the user declared (``None`` outside plan/apply, e.g. on
    read or import); ``state`` is the last observed remote state. Values in
    config win, except that unset computed fields fall back to state.
    """

    def __init__(
        self,
        schema: ResourceSchema,
        config: Mapping[str, Any] | None = None,
        state: Mapping[str, Any] | None = None,
        id: str = "",
    ) -> None:
        self.schema = schema
        self.raw_config: dict[str, Any] | None = dict(config) if config is not None else None
        self._config = schema.apply_defaults(config) if config is not None else None
        self._state: dict[str, Any] = {}
        for key, value in (state or {}).items():
            if key in schema.fields:
                self._state[key] = schema.fields[key].normalize(value)
        self._id = id or ""

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value or ""

    @property
    def config(self) -> dict[str, Any]:
        return {key: self.get(key) for key in self.schema.fields}

    def _field(self, key: str):
        try:
            return self.schema.fields[key]
        except KeyError:
            raise KeyError(f"{self.schema.name} has no attribute {key!r}") from None

    def _old(self, key: str) -> Any:
        return self._state.get(key, self._field(key).zero())

    def get(self, key: str) -> Any:
        spec = self._field(key)
        if self._config is None:
            return self._old(key)
        if key in self._config:
            return self._config[key]
        if spec.computed:
            return self._old(key)
        return spec.zero()

    def get_ok(self, key: str) -> tuple[Any, bool]:
        """Return the value and whether it is set to something other than its zero value."""
        value = self.get(key)
        return value, not self._field(key).is_zero(value)

    def get_change(self, key: str) -> tuple[Any, Any]:
        return self._old(key), self.get(key)

    def has_change(self, key: str) -> bool:
        if self._config is None:
            return False
        old, new = self.get_change(key)
        return old != new

    def set(self, key: str, value: Any) -> None:
        self._state[key] = self._field(key).normalize(value)

    def state(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in self._state.items():
            out[key] = sorted(value) if isinstance(value, set) else value
        return out
