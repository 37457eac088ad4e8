"""Pulumi dynamic provider for Scaleway serverless containers."""

from typing import Any

import pulumi

from ..api.container import ContainerAPI
from ..diagnostics import Diagnostics
from ..diff import ChangeSet
from ..errors import NotFoundError
from ..locality import new_id_string, parse_regional_id
from ..resources.container import (
    ContainerArgs,
    build_create_container_request,
    build_update_container_request,
    expand_scaling_option,
    flatten_container,
    wait_for_container,
)
from ..waiter import status_classifier, wait_for
from .base import ScalewayResource, ScalewayResourceProvider


class ContainerProvider(ScalewayResourceProvider[ContainerArgs]):
    """Manage a container of a serverless containers namespace.

    The container is created, deployed when ``deploy`` is set, then waited
    for until it reaches ``ready`` (or ``created`` when not deployed).
    """

    args_type = ContainerArgs
    api_type = ContainerAPI
    resource_label = "container"
    name_prefix = "co"

    def validate(self, args: ContainerArgs) -> None:
        expand_scaling_option(args.scaling_option)

    def _create(
        self, api: ContainerAPI, args: ContainerArgs, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        region = args.resolved_region()
        timeout = args.operation_timeout("create")

        container = api.create_container(region, build_create_container_request(args))
        if args.deploy:
            api.deploy_container(region, container.id)

        container = wait_for_container(api, region, container.id, timeout)
        if container.status == "error":
            diagnostics.error(
                f"container {container.id} is in error state", container.error_message or ""
            )
        return new_id_string(region, container.id), flatten_container(container, region, args)

    def _read(
        self, api: ContainerAPI, id_: str, args: ContainerArgs, diagnostics: Diagnostics
    ) -> dict[str, Any] | None:
        region, container_id = parse_regional_id(id_)
        try:
            container = wait_for_container(
                api, region, container_id, args.operation_timeout("read")
            )
        except NotFoundError:
            return None
        return flatten_container(container, region, args)

    def _update(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerArgs,
        changes: ChangeSet,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, container_id = parse_regional_id(id_)
        timeout = args.operation_timeout("update")

        try:
            wait_for_container(api, region, container_id, timeout)
        except NotFoundError:
            return None

        req = build_update_container_request(args, changes)
        api.update_container(region, container_id, req)

        container = wait_for_container(api, region, container_id, timeout)
        return flatten_container(container, region, args)

    def _delete(
        self, api: ContainerAPI, id_: str, args: ContainerArgs, diagnostics: Diagnostics
    ) -> None:
        region, container_id = parse_regional_id(id_)
        timeout = args.operation_timeout("delete")

        try:
            wait_for_container(api, region, container_id, timeout)
            api.delete_container(region, container_id)
            # Deletion is asynchronous, poll until the API answers 404.
            container = wait_for(
                lambda: api.get_container(region, container_id),
                status_classifier(ready=set(), error={"error"}),
                timeout=timeout,
                resource=f"deletion of container {region}/{container_id}",
            )
        except NotFoundError:
            return
        diagnostics.error(
            f"container {container_id} failed to delete", container.error_message or ""
        )


class Container(ScalewayResource):
    """Pulumi resource for a Scaleway serverless container.

    Attributes:
        name: Container name (generated when not set)
        status: Status reported by the API
        domain_name: Native domain name of the container
        error_message: Error reported by the API when status is error
    """

    provider_type = ContainerProvider

    name: pulumi.Output[str]
    region: pulumi.Output[str]
    status: pulumi.Output[str]
    domain_name: pulumi.Output[str]
    cron_status: pulumi.Output[str | None]
    error_message: pulumi.Output[str | None]
