"""Pulumi dynamic provider for DocumentDB private network endpoints."""

from typing import Any

import pulumi

from ..api.documentdb import DocumentDBAPI
from ..diagnostics import Diagnostics
from ..diff import ChangeSet
from ..errors import NotFoundError
from ..locality import expand_id, new_id_string, parse_regional_id
from ..resources.documentdb import (
    DocumentDBPrivateNetworkEndpointArgs,
    build_create_endpoint_request,
    flatten_endpoint,
    wait_for_documentdb_instance,
)
from .base import ScalewayResource, ScalewayResourceProvider


class DocumentDBPrivateNetworkEndpointProvider(
    ScalewayResourceProvider[DocumentDBPrivateNetworkEndpointArgs]
):
    """Expose a DocumentDB instance on a private network.

    The instance is locked while an endpoint is added, so creation waits for
    it before and after. Changing ``instance_id`` migrates the endpoint.
    """

    args_type = DocumentDBPrivateNetworkEndpointArgs
    api_type = DocumentDBAPI
    resource_label = "documentdb endpoint"

    def validate(self, args: DocumentDBPrivateNetworkEndpointArgs) -> None:
        build_create_endpoint_request(args)

    def _create(
        self,
        api: DocumentDBAPI,
        args: DocumentDBPrivateNetworkEndpointArgs,
        diagnostics: Diagnostics,
    ) -> tuple[str, dict[str, Any]]:
        region = args.resolved_region()
        instance_id = expand_id(args.instance_id)
        timeout = args.operation_timeout("create")
        req = build_create_endpoint_request(args)

        try:
            wait_for_documentdb_instance(api, region, instance_id, timeout)
            endpoint = api.create_endpoint(region, req)
            wait_for_documentdb_instance(api, region, instance_id, timeout)
        except NotFoundError as e:
            diagnostics.error(f"documentdb instance {region}/{instance_id} not found", str(e))
            return "", {}

        endpoint = api.get_endpoint(region, endpoint.id)
        return new_id_string(region, endpoint.id), flatten_endpoint(endpoint, region, args)

    def _read(
        self,
        api: DocumentDBAPI,
        id_: str,
        args: DocumentDBPrivateNetworkEndpointArgs,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, endpoint_id = parse_regional_id(id_)
        try:
            endpoint = api.get_endpoint(region, endpoint_id)
        except NotFoundError:
            return None
        return flatten_endpoint(endpoint, region, args)

    def _update(
        self,
        api: DocumentDBAPI,
        id_: str,
        args: DocumentDBPrivateNetworkEndpointArgs,
        changes: ChangeSet,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, endpoint_id = parse_regional_id(id_)

        if changes.has_change("instance_id"):
            instance_id = expand_id(args.instance_id)
            api.migrate_endpoint(region, endpoint_id, instance_id)
            wait_for_documentdb_instance(
                api, region, instance_id, args.operation_timeout("update")
            )

        return self._read(api, id_, args, diagnostics)

    def _delete(
        self,
        api: DocumentDBAPI,
        id_: str,
        args: DocumentDBPrivateNetworkEndpointArgs,
        diagnostics: Diagnostics,
    ) -> None:
        region, endpoint_id = parse_regional_id(id_)
        try:
            api.delete_endpoint(region, endpoint_id)
        except NotFoundError:
            return


class DocumentDBPrivateNetworkEndpoint(ScalewayResource):
    """Pulumi resource for a DocumentDB private network endpoint."""

    provider_type = DocumentDBPrivateNetworkEndpointProvider

    instance_id: pulumi.Output[str]
    region: pulumi.Output[str]
    private_network: pulumi.Output[dict]
