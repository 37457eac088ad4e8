"""Pulumi dynamic providers for Scaleway resources."""

from .applesilicon_server import AppleSiliconServer, AppleSiliconServerProvider
from .base import ScalewayResource, ScalewayResourceProvider
from .container import Container, ContainerProvider
from .container_domain import ContainerDomain, ContainerDomainProvider
from .container_trigger import ContainerTrigger, ContainerTriggerProvider
from .documentdb_endpoint import (
    DocumentDBPrivateNetworkEndpoint,
    DocumentDBPrivateNetworkEndpointProvider,
)
from .inference_deployment import InferenceDeployment, InferenceDeploymentProvider
from .inference_endpoint import InferenceEndpoint, InferenceEndpointProvider

__all__ = [
    "AppleSiliconServer",
    "AppleSiliconServerProvider",
    "Container",
    "ContainerDomain",
    "ContainerDomainProvider",
    "ContainerProvider",
    "ContainerTrigger",
    "ContainerTriggerProvider",
    "DocumentDBPrivateNetworkEndpoint",
    "DocumentDBPrivateNetworkEndpointProvider",
    "InferenceDeployment",
    "InferenceDeploymentProvider",
    "InferenceEndpoint",
    "InferenceEndpointProvider",
    "ScalewayResource",
    "ScalewayResourceProvider",
]
