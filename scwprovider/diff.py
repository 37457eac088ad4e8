"""Field-level change tracking between the previous and the new arguments.

A ChangeSet is built fresh for every engine callback and answers the one
question request builders ask: "did the user change this field?".
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class FieldChange:
    """Old and new value of one declared field."""

    name: str
    old: Any
    new: Any
    changed: bool


def _as_mapping(value: BaseModel | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return {name: getattr(value, name) for name in type(value).model_fields}
    return value


class ChangeSet:
    """Per-field (old, new, changed) triples for one resource."""

    def __init__(self, changes: list[FieldChange]):
        self._changes = {change.name: change for change in changes}

    @classmethod
    def between(
        cls,
        old: BaseModel | Mapping[str, Any] | None,
        new: BaseModel | Mapping[str, Any],
        fields: list[str] | None = None,
    ) -> "ChangeSet":
        """Compare two argument sets field by field.

        Args:
            old: Previous arguments (None on create, every field then counts as changed
                when it has a value)
            new: Desired arguments
            fields: Fields to compare (defaults to every field of new)
        """
        old_values = _as_mapping(old)
        new_values = _as_mapping(new)
        names = fields if fields is not None else list(new_values)

        changes = []
        for name in names:
            old_value = old_values.get(name)
            new_value = new_values.get(name)
            changes.append(
                FieldChange(name, old_value, new_value, old_value != new_value)
            )
        return cls(changes)

    def has_change(self, *names: str) -> bool:
        """True if any of the named fields changed."""
        return any(
            self._changes[name].changed for name in names if name in self._changes
        )

    def get_change(self, name: str) -> tuple[Any, Any]:
        change = self._changes.get(name)
        if change is None:
            return None, None
        return change.old, change.new

    @property
    def changed(self) -> list[str]:
        return [change.name for change in self._changes.values() if change.changed]

    def __iter__(self) -> Iterator[FieldChange]:
        return iter(self._changes.values())

    def __len__(self) -> int:
        return len(self._changes)

    def __bool__(self) -> bool:
        return bool(self.changed)

    def __repr__(self) -> str:
        return f"ChangeSet(changed={self.changed})"
