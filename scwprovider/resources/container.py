"""Serverless container: arguments, request builders, flatteners and waiter."""

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, field_validator

from ..api.container import (
    Container,
    ContainerAPI,
    ContainerHealthCheckSpec,
    ContainerHealthCheckSpecHTTPProbe,
    ContainerScalingOption,
    CreateContainerRequest,
    UpdateContainerRequest,
)
from ..conversions import (
    api_duration_to_seconds,
    expand_api_duration,
    expand_or_generate_name,
    normalize_duration,
    seconds_to_api_duration,
)
from ..diff import ChangeSet
from ..errors import ValidationError
from ..locality import expand_id, flatten_id
from ..secret_envs import expand_secrets, filter_secret_envs_to_patch, merge_state_secrets
from ..waiter import status_classifier, wait_for
from .base import RegionalArgs

logger = logging.getLogger(__name__)

DEFAULT_CONTAINER_TIMEOUT = 12 * 60 + 30

classify_container = status_classifier(
    ready={"ready", "created"},
    error={"error", "locked"},
)


class HealthCheckHTTP(BaseModel):
    path: str


class HealthCheck(BaseModel):
    """Health check of a container.

    Attributes:
        http: HTTP probe, a TCP probe is used when unset
        failure_threshold: Consecutive failures before the container is restarted
        interval: Period between two checks as a duration (``10s``, ``1m``)
    """

    http: HealthCheckHTTP | None = None
    failure_threshold: int
    interval: str | None = None

    @field_validator("interval")
    @classmethod
    def _normalize_interval(cls, value: str | None) -> str | None:
        return normalize_duration(value)


class ScalingOption(BaseModel):
    """Autoscaling metric, at most one threshold may be set."""

    concurrent_requests_threshold: int = 0
    cpu_usage_threshold: int = 0
    memory_usage_threshold: int = 0


class ContainerArgs(RegionalArgs):
    default_timeout: ClassVar[float] = DEFAULT_CONTAINER_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = ("namespace_id", "name", "region")
    computed_fields: ClassVar[tuple[str, ...]] = (
        "status",
        "error_message",
        "domain_name",
        "cron_status",
    )
    optional_computed_fields: ClassVar[tuple[str, ...]] = (
        "min_scale",
        "registry_image",
        "max_scale",
        "memory_limit",
        "cpu_limit",
        "timeout",
        "max_concurrency",
        "port",
        "sandbox",
        "health_check",
        "scaling_option",
        "local_storage_limit",
    )

    namespace_id: str
    name: str | None = None
    description: str | None = None
    environment_variables: dict[str, str] | None = None
    secret_environment_variables: dict[str, str] | None = None
    min_scale: int | None = None
    max_scale: int | None = None
    memory_limit: int | None = None
    cpu_limit: int | None = None
    timeout: int | None = None
    privacy: str = "public"
    registry_image: str | None = None
    registry_sha256: str | None = None
    max_concurrency: int | None = None
    protocol: str = "http1"
    port: int | None = None
    deploy: bool = False
    http_option: str = "enabled"
    sandbox: str | None = None
    health_check: HealthCheck | None = None
    scaling_option: ScalingOption | None = None
    local_storage_limit: int | None = None
    tags: list[str] | None = None
    command: list[str] | None = None
    args: list[str] | None = None
    private_network_id: str | None = None


def expand_health_check(health_check: HealthCheck | None) -> ContainerHealthCheckSpec:
    if health_check is None:
        return ContainerHealthCheckSpec()

    spec = ContainerHealthCheckSpec(failure_threshold=health_check.failure_threshold)
    if health_check.http is not None:
        spec.http = ContainerHealthCheckSpecHTTPProbe(path=health_check.http.path)
    if health_check.interval is not None:
        spec.interval = expand_api_duration(health_check.interval)
    return spec


def flatten_health_check(spec: ContainerHealthCheckSpec | None) -> dict[str, Any] | None:
    if spec is None:
        return None
    return {
        "http": {"path": spec.http.path} if spec.http is not None else None,
        "failure_threshold": spec.failure_threshold,
        "interval": normalize_duration(spec.interval),
    }


def expand_scaling_option(option: ScalingOption | None) -> ContainerScalingOption:
    """Build the scaling option request.

    Raises:
        ValidationError: If more than one threshold is set
    """
    if option is None:
        return ContainerScalingOption()

    expanded = ContainerScalingOption()
    set_fields = 0
    if option.concurrent_requests_threshold:
        expanded.concurrent_requests_threshold = option.concurrent_requests_threshold
        set_fields += 1
    if option.cpu_usage_threshold:
        expanded.cpu_usage_threshold = option.cpu_usage_threshold
        set_fields += 1
    if option.memory_usage_threshold:
        expanded.memory_usage_threshold = option.memory_usage_threshold
        set_fields += 1

    if set_fields > 1:
        raise ValidationError("a maximum of one scaling option can be set")
    return expanded


def flatten_scaling_option(option: ContainerScalingOption | None) -> dict[str, int] | None:
    if option is None:
        return None
    return {
        "concurrent_requests_threshold": option.concurrent_requests_threshold or 0,
        "cpu_usage_threshold": option.cpu_usage_threshold or 0,
        "memory_usage_threshold": option.memory_usage_threshold or 0,
    }


def build_create_container_request(args: ContainerArgs) -> CreateContainerRequest:
    """Map declared arguments to a creation request, omitting unset fields."""
    req = CreateContainerRequest(
        namespace_id=expand_id(args.namespace_id),
        name=expand_or_generate_name(args.name, "co"),
        privacy=args.privacy,
        protocol=args.protocol,
        http_option=args.http_option,
    )

    if args.environment_variables:
        req.environment_variables = args.environment_variables
    if args.secret_environment_variables:
        req.secret_environment_variables = expand_secrets(args.secret_environment_variables)
    if args.min_scale:
        req.min_scale = args.min_scale
    if args.max_scale:
        req.max_scale = args.max_scale
    if args.memory_limit:
        req.memory_limit = args.memory_limit
    if args.cpu_limit:
        req.cpu_limit = args.cpu_limit
    if args.timeout:
        req.timeout = seconds_to_api_duration(args.timeout)
    if args.port:
        req.port = args.port
    if args.description:
        req.description = args.description
    if args.registry_image:
        req.registry_image = args.registry_image
    if args.max_concurrency:
        req.max_concurrency = args.max_concurrency
    if args.sandbox:
        req.sandbox = args.sandbox
    if args.health_check is not None:
        req.health_check = expand_health_check(args.health_check)
    if args.scaling_option is not None:
        req.scaling_option = expand_scaling_option(args.scaling_option)
    if args.local_storage_limit:
        req.local_storage_limit = args.local_storage_limit
    if args.tags:
        req.tags = args.tags
    if args.command:
        req.command = args.command
    if args.args:
        req.args = args.args
    if args.private_network_id:
        req.private_network_id = expand_id(args.private_network_id)

    return req


def build_update_container_request(
    args: ContainerArgs, changes: ChangeSet
) -> UpdateContainerRequest:
    """Map changed arguments to a partial update request.

    Only fields reported as changed are assigned, so ``model_fields_set`` of
    the result is exactly what gets sent. ``redeploy`` follows ``deploy`` and
    is forced when the image digest changed.
    """
    req = UpdateContainerRequest()

    if changes.has_change("environment_variables"):
        req.environment_variables = args.environment_variables or {}

    if changes.has_change("secret_environment_variables"):
        old, new = changes.get_change("secret_environment_variables")
        req.secret_environment_variables = filter_secret_envs_to_patch(
            expand_secrets(old), expand_secrets(new)
        )

    if changes.has_change("tags"):
        req.tags = args.tags or []
    if changes.has_change("min_scale"):
        req.min_scale = args.min_scale or 0
    if changes.has_change("max_scale"):
        req.max_scale = args.max_scale or 0
    if changes.has_change("memory_limit"):
        req.memory_limit = args.memory_limit or 0
    if changes.has_change("cpu_limit"):
        req.cpu_limit = args.cpu_limit or 0
    if changes.has_change("timeout"):
        req.timeout = seconds_to_api_duration(args.timeout or 0)
    if changes.has_change("privacy"):
        req.privacy = args.privacy
    if changes.has_change("description"):
        req.description = args.description or ""
    if changes.has_change("registry_image"):
        req.registry_image = args.registry_image
    if changes.has_change("max_concurrency"):
        req.max_concurrency = args.max_concurrency or 0
    if changes.has_change("protocol"):
        req.protocol = args.protocol
    if changes.has_change("port"):
        req.port = args.port or 0
    if changes.has_change("http_option"):
        req.http_option = args.http_option
    if changes.has_change("deploy"):
        req.redeploy = args.deploy
    if changes.has_change("sandbox"):
        req.sandbox = args.sandbox
    if changes.has_change("health_check"):
        req.health_check = expand_health_check(args.health_check)
    if changes.has_change("scaling_option"):
        req.scaling_option = expand_scaling_option(args.scaling_option)

    if changes.has_change("registry_sha256"):
        req.redeploy = True

    if changes.has_change("local_storage_limit"):
        req.local_storage_limit = args.local_storage_limit or 0
    if changes.has_change("command"):
        req.command = args.command or []
    if changes.has_change("args"):
        req.args = args.args or []
    if changes.has_change("private_network_id"):
        req.private_network_id = expand_id(args.private_network_id)

    return req


def flatten_container(
    container: Container, region: str, declared: ContainerArgs
) -> dict[str, Any]:
    """Map an API container to provider outputs."""
    outs = declared.to_props()
    outs.update(
        {
            "region": region,
            "name": container.name,
            "namespace_id": flatten_id(declared.namespace_id, region, container.namespace_id),
            "description": container.description or None,
            "environment_variables": container.environment_variables or None,
            "secret_environment_variables": merge_state_secrets(
                declared.secret_environment_variables,
                container.secret_environment_variables,
            ),
            "min_scale": container.min_scale,
            "max_scale": container.max_scale,
            "memory_limit": container.memory_limit,
            "cpu_limit": container.cpu_limit,
            "timeout": api_duration_to_seconds(container.timeout),
            "privacy": container.privacy or declared.privacy,
            "registry_image": container.registry_image,
            "max_concurrency": container.max_concurrency,
            "protocol": container.protocol or declared.protocol,
            "port": container.port,
            "http_option": container.http_option or declared.http_option,
            "sandbox": container.sandbox,
            "health_check": flatten_health_check(container.health_check),
            "scaling_option": flatten_scaling_option(container.scaling_option),
            "local_storage_limit": container.local_storage_limit,
            "tags": container.tags or None,
            "command": container.command or None,
            "args": container.args or None,
            "private_network_id": flatten_id(
                declared.private_network_id, region, container.private_network_id
            ),
            "status": container.status,
            "error_message": container.error_message,
            "domain_name": container.domain_name,
            "cron_status": container.cron_status,
        }
    )
    return outs


def wait_for_container(
    api: ContainerAPI,
    region: str,
    container_id: str,
    timeout: float,
    interval: float | None = None,
) -> Container:
    return wait_for(
        lambda: api.get_container(region, container_id),
        classify_container,
        timeout=timeout,
        interval=interval,
        resource=f"container {region}/{container_id}",
    )
