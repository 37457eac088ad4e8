"""Pulumi dynamic provider for Apple silicon servers."""

from typing import Any

import pulumi

from ..api.applesilicon import AppleSiliconAPI, ServerPrivateNetwork
from ..diagnostics import Diagnostics
from ..diff import ChangeSet
from ..errors import NotFoundError, ValidationError
from ..locality import new_id_string, parse_zonal_id
from ..resources.applesilicon import (
    AppleSiliconServerArgs,
    build_create_server_request,
    build_update_server_request,
    expand_private_networks,
    flatten_server,
    wait_for_apple_silicon_server,
    wait_for_server_private_networks,
)
from ..settings import get_settings
from .base import ScalewayResource, ScalewayResourceProvider


class AppleSiliconServerProvider(ScalewayResourceProvider[AppleSiliconServerArgs]):
    """Manage an Apple silicon server and its private network attachments.

    Private networks require ``enable_vpc``. The whole set of attachments is
    replaced on every change, the API reconciles it.
    """

    args_type = AppleSiliconServerArgs
    api_type = AppleSiliconAPI
    resource_label = "apple silicon server"
    name_prefix = "as"

    def validate(self, args: AppleSiliconServerArgs) -> None:
        if args.private_network and not args.enable_vpc:
            raise ValidationError("private_network requires enable_vpc to be true")

    def _apply_defaults(self, args: AppleSiliconServerArgs, olds: dict[str, Any]) -> None:
        super()._apply_defaults(args, olds)
        if not args.project_id:
            args.project_id = olds.get("project_id") or get_settings().default_project_id

    def _create(
        self, api: AppleSiliconAPI, args: AppleSiliconServerArgs, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        zone = args.resolved_zone()
        timeout = args.operation_timeout("create")

        req = build_create_server_request(args, get_settings().default_project_id)
        server = api.create_server(zone, req)
        server = wait_for_apple_silicon_server(api, zone, server.id, timeout)

        networks: list[ServerPrivateNetwork] = []
        if args.private_network:
            api.set_server_private_networks(
                zone, server.id, expand_private_networks(args.private_network)
            )
            networks = wait_for_server_private_networks(api, zone, server.id, timeout)

        if server.status == "error":
            diagnostics.error(f"apple silicon server {server.id} is in error state")
        return new_id_string(zone, server.id), flatten_server(server, zone, networks, args)

    def _read(
        self,
        api: AppleSiliconAPI,
        id_: str,
        args: AppleSiliconServerArgs,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        zone, server_id = parse_zonal_id(id_)
        timeout = args.operation_timeout("read")

        try:
            server = wait_for_apple_silicon_server(api, zone, server_id, timeout)
        except NotFoundError:
            return None

        networks = []
        if server.vpc_status == "vpc_enabled" or args.enable_vpc:
            networks = wait_for_server_private_networks(api, zone, server_id, timeout)
        return flatten_server(server, zone, networks, args)

    def _update(
        self,
        api: AppleSiliconAPI,
        id_: str,
        args: AppleSiliconServerArgs,
        changes: ChangeSet,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        zone, server_id = parse_zonal_id(id_)
        timeout = args.operation_timeout("update")

        try:
            wait_for_apple_silicon_server(api, zone, server_id, timeout)
        except NotFoundError:
            return None

        req = build_update_server_request(args, changes)
        if req.model_fields_set:
            api.update_server(zone, server_id, req)
            wait_for_apple_silicon_server(api, zone, server_id, timeout)

        if changes.has_change("private_network"):
            api.set_server_private_networks(
                zone, server_id, expand_private_networks(args.private_network)
            )
            wait_for_server_private_networks(api, zone, server_id, timeout)

        return self._read(api, id_, args, diagnostics)

    def _delete(
        self,
        api: AppleSiliconAPI,
        id_: str,
        args: AppleSiliconServerArgs,
        diagnostics: Diagnostics,
    ) -> None:
        zone, server_id = parse_zonal_id(id_)
        timeout = args.operation_timeout("delete")

        try:
            wait_for_apple_silicon_server(api, zone, server_id, timeout)
            api.delete_server(zone, server_id)
            wait_for_apple_silicon_server(api, zone, server_id, timeout)
        except NotFoundError:
            return


class AppleSiliconServer(ScalewayResource):
    """Pulumi resource for an Apple silicon server.

    Attributes:
        ip: Public IPv4 of the server
        vnc_url: URL of the VNC console
        status: Status reported by the API
        deletable_at: Earliest date the server can be deleted (24h billing)
    """

    provider_type = AppleSiliconServerProvider

    name: pulumi.Output[str]
    zone: pulumi.Output[str]
    ip: pulumi.Output[str]
    vnc_url: pulumi.Output[str]
    status: pulumi.Output[str]
    vpc_status: pulumi.Output[str]
    organization_id: pulumi.Output[str]
    created_at: pulumi.Output[str]
    updated_at: pulumi.Output[str]
    deletable_at: pulumi.Output[str]
