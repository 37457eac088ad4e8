"""Base classes for typed resource arguments."""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict

from ..diff import ChangeSet
from ..settings import get_settings

logger = logging.getLogger(__name__)

Operation = Literal["create", "read", "update", "delete"]


class Timeouts(BaseModel):
    """Per-operation timeouts in seconds, unset ones use the resource default."""

    create: float | None = None
    read: float | None = None
    update: float | None = None
    delete: float | None = None


class ResourceArgs(BaseModel):
    """Declared configuration of a resource.

    Subclasses list their fields as typed attributes. Pulumi hands providers
    plain dictionaries, ``from_props`` turns them back into the typed model
    (computed outputs stored next to the inputs are ignored).

    Class attributes:
        default_timeout: Seconds used when ``timeouts`` does not set the operation
        replace_fields: Fields whose change requires a new resource
        computed_fields: Output-only fields exposed by the Pulumi resource
        optional_computed_fields: Inputs the API fills in when left unset, leaving
            them unset is not a change (dotted paths reach nested blocks)
    """

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    default_timeout: ClassVar[float] = 300.0
    replace_fields: ClassVar[tuple[str, ...]] = ()
    computed_fields: ClassVar[tuple[str, ...]] = ()
    optional_computed_fields: ClassVar[tuple[str, ...]] = ()

    timeouts: Timeouts | None = None

    @classmethod
    def from_props(cls, props: Mapping[str, Any] | None):
        return cls.model_validate(dict(props or {}))

    def to_props(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def operation_timeout(self, operation: Operation) -> float:
        if self.timeouts is not None:
            value = getattr(self.timeouts, operation)
            if value is not None:
                return value
        return self.default_timeout

    @classmethod
    def input_fields(cls) -> list[str]:
        return [name for name in cls.model_fields if name != "timeouts"]

    @classmethod
    def changes(
        cls,
        old_props: Mapping[str, Any] | None,
        new_props: Mapping[str, Any],
    ) -> ChangeSet:
        """Field changes between the previous state and the new inputs."""
        old = cls.from_props(old_props) if old_props is not None else None
        new = cls.from_props(new_props)
        if old is not None:
            for path in cls.optional_computed_fields:
                _inherit_unset(new, old, path)
        return ChangeSet.between(old, new, cls.input_fields())


def _inherit_unset(new: BaseModel, old: BaseModel, path: str) -> None:
    """Copy old.<path> into new.<path> when the latter is unset.

    ``path`` may be dotted to reach into a nested block.
    """
    head, _, rest = path.partition(".")
    if rest:
        new_block = getattr(new, head)
        old_block = getattr(old, head)
        if new_block is not None and old_block is not None:
            _inherit_unset(new_block, old_block, rest)
    elif getattr(new, head) is None:
        setattr(new, head, getattr(old, head))


class RegionalArgs(ResourceArgs):
    region: str | None = None

    def resolved_region(self) -> str:
        return self.region or get_settings().default_region


class ZonalArgs(ResourceArgs):
    zone: str | None = None

    def resolved_zone(self) -> str:
        return self.zone or get_settings().default_zone
