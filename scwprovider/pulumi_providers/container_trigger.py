"""Pulumi dynamic provider for triggers of serverless containers."""

from typing import Any

import pulumi

from ..api.container import ContainerAPI
from ..diagnostics import Diagnostics
from ..diff import ChangeSet
from ..errors import NotFoundError
from ..locality import new_id_string, parse_regional_id
from ..resources.trigger import (
    ContainerTriggerArgs,
    build_create_trigger_request,
    build_update_trigger_request,
    complete_mnq_configs,
    flatten_trigger,
    validate_trigger_args,
    wait_for_container_trigger,
)
from ..settings import get_settings
from .base import ScalewayResource, ScalewayResourceProvider


class ContainerTriggerProvider(ScalewayResourceProvider[ContainerTriggerArgs]):
    """Manage a trigger invoking a container on SQS or NATS messages.

    A trigger whose status is ``error`` is still reported by ``read``, with a
    warning, so it can be fixed or replaced.
    """

    args_type = ContainerTriggerArgs
    api_type = ContainerAPI
    resource_label = "container trigger"
    name_prefix = "trigger"

    def validate(self, args: ContainerTriggerArgs) -> None:
        validate_trigger_args(args)

    def _apply_defaults(self, args: ContainerTriggerArgs, olds: dict[str, Any]) -> None:
        super()._apply_defaults(args, olds)
        completed = complete_mnq_configs(args, args.region, get_settings().default_project_id)
        args.sqs = completed.sqs
        args.nats = completed.nats

    def _create(
        self, api: ContainerAPI, args: ContainerTriggerArgs, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        region = args.resolved_region()

        req = build_create_trigger_request(args, region, get_settings().default_project_id)
        trigger = api.create_trigger(region, req)
        trigger = wait_for_container_trigger(
            api, region, trigger.id, args.operation_timeout("create")
        )
        if trigger.status == "error":
            diagnostics.error(
                f"trigger {trigger.id} is in error state", trigger.error_message or ""
            )
        return new_id_string(region, trigger.id), flatten_trigger(trigger, region, args)

    def _read(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerTriggerArgs,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, trigger_id = parse_regional_id(id_)
        try:
            trigger = wait_for_container_trigger(
                api, region, trigger_id, args.operation_timeout("read")
            )
        except NotFoundError:
            return None

        if trigger.status == "error":
            diagnostics.warning("Trigger in error state", trigger.error_message or "")
        return flatten_trigger(trigger, region, args)

    def _update(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerTriggerArgs,
        changes: ChangeSet,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, trigger_id = parse_regional_id(id_)
        timeout = args.operation_timeout("update")

        try:
            wait_for_container_trigger(api, region, trigger_id, timeout)
        except NotFoundError:
            return None

        req = build_update_trigger_request(args, changes)
        if req.model_fields_set:
            api.update_trigger(region, trigger_id, req)

        trigger = wait_for_container_trigger(api, region, trigger_id, timeout)
        return flatten_trigger(trigger, region, args)

    def _delete(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerTriggerArgs,
        diagnostics: Diagnostics,
    ) -> None:
        region, trigger_id = parse_regional_id(id_)
        timeout = args.operation_timeout("delete")

        try:
            wait_for_container_trigger(api, region, trigger_id, timeout)
            api.delete_trigger(region, trigger_id)
        except NotFoundError:
            return


class ContainerTrigger(ScalewayResource):
    """Pulumi resource for a container trigger.

    Attributes:
        status: Status reported by the API
        error_message: Error reported by the API when status is error
    """

    provider_type = ContainerTriggerProvider

    name: pulumi.Output[str]
    region: pulumi.Output[str]
    status: pulumi.Output[str]
    error_message: pulumi.Output[str | None]
