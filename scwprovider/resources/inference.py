"""Managed inference deployment and its endpoints."""

from typing import Any, ClassVar

from pydantic import BaseModel

from ..api.inference import (
    CreateDeploymentRequest,
    Deployment,
    EndpointSpec,
    EndpointSpecPrivateNetwork,
    EndpointSpecPublic,
    InferenceAPI,
    UpdateDeploymentRequest,
)
from ..conversions import expand_or_generate_name
from ..diff import ChangeSet
from ..errors import ValidationError
from ..locality import expand_id, flatten_id
from ..waiter import status_classifier, wait_for
from .base import RegionalArgs

DEFAULT_INFERENCE_DEPLOYMENT_TIMEOUT = 80 * 60

classify_deployment = status_classifier(ready={"ready"}, error={"error", "locked"})


class DeploymentEndpoint(BaseModel):
    public_endpoint: bool | None = None
    private_endpoint: str | None = None


class InferenceDeploymentArgs(RegionalArgs):
    default_timeout: ClassVar[float] = DEFAULT_INFERENCE_DEPLOYMENT_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = (
        "project_id",
        "node_type",
        "model_name",
        "accept_eula",
        "endpoints",
        "region",
    )
    computed_fields: ClassVar[tuple[str, ...]] = (
        "size",
        "status",
        "endpoint_public_id",
        "endpoint_public_url",
        "endpoint_private_id",
        "endpoint_private_url",
    )
    optional_computed_fields: ClassVar[tuple[str, ...]] = ("project_id", "min_size", "max_size")

    node_type: str
    model_name: str
    endpoints: list[DeploymentEndpoint]
    name: str | None = None
    project_id: str | None = None
    accept_eula: bool = False
    tags: list[str] | None = None
    min_size: int | None = None
    max_size: int | None = None


def expand_deployment_endpoints(endpoints: list[DeploymentEndpoint]) -> list[EndpointSpec]:
    """One endpoint spec per exposure: public and/or private network."""
    specs = []
    for endpoint in endpoints:
        if endpoint.public_endpoint:
            specs.append(EndpointSpec(public=EndpointSpecPublic()))
        if endpoint.private_endpoint:
            specs.append(
                EndpointSpec(
                    private_network=EndpointSpecPrivateNetwork(
                        private_network_id=expand_id(endpoint.private_endpoint)
                    )
                )
            )
    return specs


def build_create_deployment_request(
    args: InferenceDeploymentArgs, default_project_id: str | None = None
) -> CreateDeploymentRequest:
    """Raises ValidationError when no endpoint is exposed."""
    specs = expand_deployment_endpoints(args.endpoints)
    if not specs:
        raise ValidationError("at least one public or private endpoint must be set")

    req = CreateDeploymentRequest(
        name=expand_or_generate_name(args.name, "inference"),
        project_id=args.project_id or default_project_id,
        node_type=args.node_type,
        model_name=args.model_name,
        tags=args.tags or [],
        endpoints=specs,
    )
    if args.min_size:
        req.min_size = args.min_size
    if args.max_size:
        req.max_size = args.max_size
    if args.accept_eula:
        req.accept_eula = True
    return req


def build_update_deployment_request(
    args: InferenceDeploymentArgs, changes: ChangeSet
) -> UpdateDeploymentRequest:
    req = UpdateDeploymentRequest()
    if changes.has_change("name"):
        req.name = args.name or ""
    if changes.has_change("tags"):
        req.tags = args.tags or []
    if changes.has_change("min_size"):
        req.min_size = args.min_size
    if changes.has_change("max_size"):
        req.max_size = args.max_size
    return req


def flatten_deployment(
    deployment: Deployment, region: str, declared: InferenceDeploymentArgs
) -> dict[str, Any]:
    outs = declared.to_props()
    outs.update(
        {
            "region": region,
            "name": deployment.name,
            "project_id": deployment.project_id,
            "node_type": deployment.node_type,
            "model_name": deployment.model_name,
            "tags": deployment.tags or None,
            "min_size": deployment.min_size,
            "max_size": deployment.max_size,
            "size": deployment.size,
            "status": deployment.status,
            "endpoint_public_id": None,
            "endpoint_public_url": None,
            "endpoint_private_id": None,
            "endpoint_private_url": None,
        }
    )

    for endpoint in deployment.endpoints:
        if endpoint.public is not None:
            outs["endpoint_public_id"] = endpoint.id
            outs["endpoint_public_url"] = endpoint.url
        if endpoint.private_network is not None:
            outs["endpoint_private_id"] = endpoint.id
            outs["endpoint_private_url"] = endpoint.url
    return outs


def wait_for_deployment(
    api: InferenceAPI,
    region: str,
    deployment_id: str,
    timeout: float,
    interval: float | None = None,
) -> Deployment:
    return wait_for(
        lambda: api.get_deployment(region, deployment_id),
        classify_deployment,
        timeout=timeout,
        interval=interval,
        resource=f"inference deployment {region}/{deployment_id}",
    )


class PublicEndpoint(BaseModel):
    disable_auth: bool = False


class PrivateEndpoint(BaseModel):
    private_network_id: str
    disable_auth: bool = False


class InferenceEndpointArgs(RegionalArgs):
    """Endpoints added to an existing deployment, at least one must be set."""

    default_timeout: ClassVar[float] = DEFAULT_INFERENCE_DEPLOYMENT_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = ("deployment_id", "region")
    computed_fields: ClassVar[tuple[str, ...]] = (
        "public_endpoint_id",
        "public_endpoint_url",
        "private_endpoint_id",
        "private_endpoint_url",
    )

    deployment_id: str
    public_endpoint: PublicEndpoint | None = None
    private_endpoint: PrivateEndpoint | None = None


def validate_endpoint_args(args: InferenceEndpointArgs) -> None:
    if args.public_endpoint is None and args.private_endpoint is None:
        raise ValidationError(
            '"public_endpoint": one of `private_endpoint,public_endpoint` must be specified'
        )


def expand_public_endpoint(endpoint: PublicEndpoint) -> EndpointSpec:
    return EndpointSpec(public=EndpointSpecPublic(), disable_auth=endpoint.disable_auth)


def expand_private_endpoint(endpoint: PrivateEndpoint) -> EndpointSpec:
    return EndpointSpec(
        private_network=EndpointSpecPrivateNetwork(
            private_network_id=expand_id(endpoint.private_network_id)
        ),
        disable_auth=endpoint.disable_auth,
    )


def flatten_inference_endpoints(
    deployment: Deployment,
    region: str,
    declared: InferenceEndpointArgs,
    public_endpoint_id: str | None,
    private_endpoint_id: str | None,
) -> dict[str, Any]:
    """Outputs of the endpoint resource, only endpoints it created are reported."""
    outs = declared.to_props()
    outs.update(
        {
            "region": region,
            "public_endpoint": None,
            "private_endpoint": None,
            "public_endpoint_id": None,
            "public_endpoint_url": None,
            "private_endpoint_id": None,
            "private_endpoint_url": None,
        }
    )

    for endpoint in deployment.endpoints:
        if public_endpoint_id and endpoint.id == public_endpoint_id:
            outs["public_endpoint"] = {"disable_auth": endpoint.disable_auth}
            outs["public_endpoint_id"] = endpoint.id
            outs["public_endpoint_url"] = endpoint.url
        if private_endpoint_id and endpoint.id == private_endpoint_id:
            declared_network = (
                declared.private_endpoint.private_network_id
                if declared.private_endpoint
                else None
            )
            network_id = (
                endpoint.private_network.private_network_id
                if endpoint.private_network
                else None
            )
            outs["private_endpoint"] = {
                "private_network_id": flatten_id(declared_network, region, network_id),
                "disable_auth": endpoint.disable_auth,
            }
            outs["private_endpoint_id"] = endpoint.id
            outs["private_endpoint_url"] = endpoint.url
    return outs
