"""Pulumi dynamic provider for managed inference deployments."""

from typing import Any

import pulumi

from ..api.inference import InferenceAPI
from ..diagnostics import Diagnostics
from ..diff import ChangeSet
from ..errors import NotFoundError, ValidationError
from ..locality import new_id_string, parse_regional_id
from ..resources.inference import (
    InferenceDeploymentArgs,
    build_create_deployment_request,
    build_update_deployment_request,
    expand_deployment_endpoints,
    flatten_deployment,
    wait_for_deployment,
)
from ..settings import get_settings
from .base import ScalewayResource, ScalewayResourceProvider


class InferenceDeploymentProvider(ScalewayResourceProvider[InferenceDeploymentArgs]):
    """Deploy a model on dedicated inference nodes.

    Deployments take a long time to become ready, the default timeout of
    every operation is 80 minutes.
    """

    args_type = InferenceDeploymentArgs
    api_type = InferenceAPI
    resource_label = "inference deployment"
    name_prefix = "inference"

    def validate(self, args: InferenceDeploymentArgs) -> None:
        if not expand_deployment_endpoints(args.endpoints):
            raise ValidationError("at least one public or private endpoint must be set")

    def _apply_defaults(self, args: InferenceDeploymentArgs, olds: dict[str, Any]) -> None:
        super()._apply_defaults(args, olds)
        if not args.project_id:
            args.project_id = olds.get("project_id") or get_settings().default_project_id

    def _create(
        self, api: InferenceAPI, args: InferenceDeploymentArgs, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        region = args.resolved_region()

        req = build_create_deployment_request(args, get_settings().default_project_id)
        deployment = api.create_deployment(region, req)
        deployment = wait_for_deployment(
            api, region, deployment.id, args.operation_timeout("create")
        )
        if deployment.status == "error":
            diagnostics.error(
                f"deployment {deployment.id} is in error state",
                deployment.error_message or "",
            )
        return new_id_string(region, deployment.id), flatten_deployment(deployment, region, args)

    def _read(
        self,
        api: InferenceAPI,
        id_: str,
        args: InferenceDeploymentArgs,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, deployment_id = parse_regional_id(id_)
        try:
            deployment = wait_for_deployment(
                api, region, deployment_id, args.operation_timeout("read")
            )
        except NotFoundError:
            return None
        return flatten_deployment(deployment, region, args)

    def _update(
        self,
        api: InferenceAPI,
        id_: str,
        args: InferenceDeploymentArgs,
        changes: ChangeSet,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, deployment_id = parse_regional_id(id_)
        timeout = args.operation_timeout("update")

        try:
            wait_for_deployment(api, region, deployment_id, timeout)
        except NotFoundError:
            return None

        req = build_update_deployment_request(args, changes)
        if req.model_fields_set:
            api.update_deployment(region, deployment_id, req)

        deployment = wait_for_deployment(api, region, deployment_id, timeout)
        return flatten_deployment(deployment, region, args)

    def _delete(
        self,
        api: InferenceAPI,
        id_: str,
        args: InferenceDeploymentArgs,
        diagnostics: Diagnostics,
    ) -> None:
        region, deployment_id = parse_regional_id(id_)
        timeout = args.operation_timeout("delete")

        try:
            wait_for_deployment(api, region, deployment_id, timeout)
            api.delete_deployment(region, deployment_id)
            wait_for_deployment(api, region, deployment_id, timeout)
        except NotFoundError:
            return


class InferenceDeployment(ScalewayResource):
    """Pulumi resource for a managed inference deployment.

    Attributes:
        size: Current number of nodes
        status: Status reported by the API
        endpoint_public_url: URL of the public endpoint, if any
        endpoint_private_url: URL of the private network endpoint, if any
    """

    provider_type = InferenceDeploymentProvider

    name: pulumi.Output[str]
    region: pulumi.Output[str]
    project_id: pulumi.Output[str]
    size: pulumi.Output[int]
    status: pulumi.Output[str]
    endpoint_public_id: pulumi.Output[str | None]
    endpoint_public_url: pulumi.Output[str | None]
    endpoint_private_id: pulumi.Output[str | None]
    endpoint_private_url: pulumi.Output[str | None]
