"""
Typed resource arguments with their request builders, flatteners and waiters.
"""

from .applesilicon import AppleSiliconServerArgs, ServerPrivateNetworkArgs
from .base import RegionalArgs, ResourceArgs, Timeouts, ZonalArgs
from .container import ContainerArgs, HealthCheck, HealthCheckHTTP, ScalingOption
from .documentdb import DocumentDBPrivateNetworkEndpointArgs, EndpointPrivateNetwork
from .domain import ContainerDomainArgs
from .inference import (
    DeploymentEndpoint,
    InferenceDeploymentArgs,
    InferenceEndpointArgs,
    PrivateEndpoint,
    PublicEndpoint,
)
from .trigger import ContainerTriggerArgs, NatsConfig, SqsConfig

__all__ = [
    "AppleSiliconServerArgs",
    "ContainerArgs",
    "ContainerDomainArgs",
    "ContainerTriggerArgs",
    "DeploymentEndpoint",
    "DocumentDBPrivateNetworkEndpointArgs",
    "EndpointPrivateNetwork",
    "HealthCheck",
    "HealthCheckHTTP",
    "InferenceDeploymentArgs",
    "InferenceEndpointArgs",
    "NatsConfig",
    "PrivateEndpoint",
    "PublicEndpoint",
    "RegionalArgs",
    "ResourceArgs",
    "ScalingOption",
    "ServerPrivateNetworkArgs",
    "SqsConfig",
    "Timeouts",
    "ZonalArgs",
]
