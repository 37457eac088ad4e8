"""Shared plumbing of the Scaleway Pulumi dynamic providers.

Every provider follows the same control flow: parse the Pulumi property bag
into the typed arguments, build a request, call the API, wait for the remote
resource to converge, flatten the response into outputs. Errors are
collected as diagnostics and raised to the engine as a ProviderError.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

import pulumi
import pydantic
from pulumi.dynamic import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    ResourceProvider,
    UpdateResult,
)

from ..api.client import ScalewayClient
from ..conversions import expand_or_generate_name
from ..diagnostics import Diagnostics
from ..errors import ProviderError, ScalewayError, ValidationError
from ..resources.base import ResourceArgs
from ..settings import configure_logging, get_settings

logger = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=ResourceArgs)


class ScalewayResourceProvider(ResourceProvider, Generic[ArgsT]):
    """Base class of the Scaleway dynamic providers.

    Subclasses set ``args_type`` and ``api_type`` and implement ``_create``,
    ``_read``, ``_update`` and ``_delete``, which receive the API object of the
    current operation. ``_read`` returns None when the remote resource is
    gone, which tells Pulumi to drop it from the state.

    Args:
        api_factory: Returns the API object used by the operations. Defaults
            to ``api_type`` wrapping a client built from the settings, which
            is closed when the operation returns.
    """

    args_type: type[ArgsT]
    api_type: type | None = None
    resource_label: str = "resource"
    name_prefix: str | None = None

    def __init__(self, api_factory: Callable[[], Any] | None = None):
        self._api_factory = api_factory

    @contextmanager
    def open_api(self) -> Iterator[Any]:
        if self._api_factory is not None:
            yield self._api_factory()
            return
        with ScalewayClient.from_settings() as client:
            yield self.api_type(client)

    # Engine callbacks

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        """Validate inputs and fill in provider defaults.

        Generated names are kept stable across runs by reusing the name
        already stored in the state.
        """
        olds = _olds or {}
        try:
            args = self.args_type.from_props(news)
        except pydantic.ValidationError as e:
            failures = [
                CheckFailure(".".join(str(part) for part in error["loc"]), error["msg"])
                for error in e.errors()
            ]
            return CheckResult(news, failures)
        except ValidationError as e:
            return CheckResult(news, [CheckFailure("", str(e))])

        self._apply_defaults(args, olds)

        try:
            self.validate(args)
        except ValidationError as e:
            logger.error(f"Invalid {self.resource_label} configuration: {e}")
            return CheckResult(news, [CheckFailure("", str(e))])

        return CheckResult(args.to_props(), [])

    def diff(self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]) -> DiffResult:
        changes = self.args_type.changes(_olds, _news)
        replaces = [
            name for name in changes.changed if name in self.args_type.replace_fields
        ]
        logger.debug(f"{self.resource_label} {_id}: changed={changes.changed} replaces={replaces}")
        return DiffResult(
            changes=bool(changes.changed),
            replaces=replaces,
            stables=[],
            delete_before_replace=True,
        )

    def create(self, props: dict[str, Any]) -> CreateResult:
        args = self.args_type.from_props(props)
        id_, outs = self._run("create", self._create, args)
        logger.info(f"Created {self.resource_label} {id_}")
        return CreateResult(id_=id_, outs=outs)

    def read(self, id_: str, props: dict[str, Any]) -> ReadResult:
        args = self.args_type.from_props(props)
        outs = self._run("read", self._read, id_, args)
        if outs is None:
            logger.info(f"{self.resource_label} {id_} not found, removing it from state")
            return ReadResult(id_="", outs={})
        return ReadResult(id_=id_, outs=outs)

    def update(self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]) -> UpdateResult:
        args = self.args_type.from_props(_news)
        changes = self.args_type.changes(_olds, _news)
        outs = self._run("update", self._update, _id, args, changes)
        if outs is None:
            # Gone while updating: report the declared values, the next
            # refresh drops the resource.
            outs = args.to_props()
        logger.info(f"Updated {self.resource_label} {_id} ({', '.join(changes.changed) or 'no change'})")
        return UpdateResult(outs=outs)

    def delete(self, _id: str, _props: dict[str, Any]) -> None:
        args = self.args_type.from_props(_props)
        self._run("delete", self._delete, _id, args)
        logger.info(f"Deleted {self.resource_label} {_id}")

    # Hooks

    def validate(self, args: ArgsT) -> None:
        """Raise ValidationError for configurations the API would refuse."""

    def _create(
        self, api: Any, args: ArgsT, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        raise NotImplementedError

    def _read(
        self, api: Any, id_: str, args: ArgsT, diagnostics: Diagnostics
    ) -> dict[str, Any] | None:
        raise NotImplementedError

    def _update(
        self, api: Any, id_: str, args: ArgsT, changes, diagnostics: Diagnostics
    ) -> dict[str, Any] | None:
        raise NotImplementedError

    def _delete(self, api: Any, id_: str, args: ArgsT, diagnostics: Diagnostics) -> None:
        raise NotImplementedError

    # Helpers

    def _apply_defaults(self, args: ArgsT, olds: dict[str, Any]) -> None:
        settings = get_settings()
        if "region" in self.args_type.model_fields and not args.region:
            args.region = olds.get("region") or settings.default_region
        if "zone" in self.args_type.model_fields and not args.zone:
            args.zone = olds.get("zone") or settings.default_zone
        if self.name_prefix and not args.name:
            args.name = olds.get("name") or expand_or_generate_name(None, self.name_prefix)

    def _run(self, operation: str, func: Callable[..., Any], *args: Any) -> Any:
        configure_logging()
        diagnostics = Diagnostics()
        try:
            with self.open_api() as api:
                result = func(api, *args, diagnostics)
        except ScalewayError as e:
            diagnostics.error(f"{self.resource_label} {operation} failed", str(e))
            logger.error(f"{self.resource_label} {operation} failed: {e}")
            raise ProviderError(list(diagnostics)) from e

        for warning in diagnostics.warnings:
            logger.warning(f"{self.resource_label}: {warning}")
        if diagnostics.has_error():
            raise ProviderError(diagnostics.errors)
        return result


def resource_props(
    args_type: type[ResourceArgs], args: ResourceArgs | Mapping[str, Any]
) -> dict[str, Any]:
    """Property bag handed to the engine.

    A mapping is passed through as is so it may hold ``pulumi.Output``
    values; ``check`` validates it once they are resolved. Computed fields
    are declared as None so the resource exposes them as outputs.
    """
    if isinstance(args, ResourceArgs):
        props = args.model_dump(mode="json", exclude_none=True)
    else:
        props = dict(args)
    for name in args_type.computed_fields:
        props.setdefault(name, None)
    return props


class ScalewayResource(pulumi.dynamic.Resource):
    """Base of the Pulumi resources backed by a Scaleway provider.

    Args:
        resource_name: Pulumi resource name
        args: Typed arguments, or a mapping of the same fields whose values
            may be Pulumi inputs
        opts: Pulumi resource options
        provider: Provider instance, defaults to ``provider_type()``
    """

    provider_type: type[ScalewayResourceProvider]

    def __init__(
        self,
        resource_name: str,
        args: ResourceArgs | Mapping[str, Any],
        opts: pulumi.ResourceOptions | None = None,
        provider: ScalewayResourceProvider | None = None,
    ):
        props = resource_props(self.provider_type.args_type, args)
        super().__init__(
            provider or self.provider_type(),
            resource_name,
            props,
            opts,
        )
