"""DocumentDB instance endpoint attached to a private network."""

from typing import Any, ClassVar

from pydantic import BaseModel

from ..api.documentdb import (
    CreateEndpointRequest,
    DocumentDBAPI,
    Endpoint,
    EndpointSpec,
    EndpointSpecPrivateNetwork,
    EndpointSpecPrivateNetworkIpamConfig,
    Instance,
)
from ..conversions import expand_ip_net, flatten_ip_net
from ..errors import ValidationError
from ..locality import expand_id, flatten_id
from ..waiter import status_classifier, wait_for
from .base import RegionalArgs

DEFAULT_DOCUMENTDB_INSTANCE_TIMEOUT = 15 * 60

classify_documentdb_instance = status_classifier(
    ready={"ready"},
    error={"error", "locked", "disk_full"},
)


class EndpointPrivateNetwork(BaseModel):
    """Private network side of the endpoint.

    ``ip_net`` pins the service address, IPAM picks one when it is unset.
    ``ip``, ``name``, ``hostname`` and ``zone`` are filled in by the API.
    """

    id: str
    ip_net: str | None = None
    port: int | None = None
    ip: str | None = None
    name: str | None = None
    hostname: str | None = None
    zone: str | None = None


class DocumentDBPrivateNetworkEndpointArgs(RegionalArgs):
    default_timeout: ClassVar[float] = DEFAULT_DOCUMENTDB_INSTANCE_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = ("private_network", "region")
    optional_computed_fields: ClassVar[tuple[str, ...]] = (
        "private_network.ip_net",
        "private_network.port",
        "private_network.ip",
        "private_network.name",
        "private_network.hostname",
        "private_network.zone",
    )

    instance_id: str
    private_network: EndpointPrivateNetwork | None = None


def build_create_endpoint_request(
    args: DocumentDBPrivateNetworkEndpointArgs,
) -> CreateEndpointRequest:
    """Raises ValidationError when no private network is declared."""
    if args.private_network is None:
        raise ValidationError("expected private_network to be set")

    spec = EndpointSpecPrivateNetwork(private_network_id=expand_id(args.private_network.id))
    if args.private_network.ip_net:
        spec.service_ip = expand_ip_net(args.private_network.ip_net)
    else:
        spec.ipam_config = EndpointSpecPrivateNetworkIpamConfig()

    return CreateEndpointRequest(
        instance_id=expand_id(args.instance_id),
        endpoint_spec=EndpointSpec(private_network=spec),
    )


def flatten_endpoint(
    endpoint: Endpoint, region: str, declared: DocumentDBPrivateNetworkEndpointArgs
) -> dict[str, Any]:
    outs = declared.to_props()
    outs["region"] = region

    details = endpoint.private_network
    if details is None:
        outs["private_network"] = None
        return outs

    declared_id = declared.private_network.id if declared.private_network else None
    outs["private_network"] = {
        "id": flatten_id(declared_id, region, details.private_network_id),
        "ip_net": flatten_ip_net(details.service_ip) or None,
        "ip": endpoint.ip,
        "port": endpoint.port,
        "name": endpoint.name,
        "hostname": endpoint.hostname,
        "zone": details.zone,
    }
    return outs


def wait_for_documentdb_instance(
    api: DocumentDBAPI,
    region: str,
    instance_id: str,
    timeout: float,
    interval: float | None = None,
) -> Instance:
    return wait_for(
        lambda: api.get_instance(region, instance_id),
        classify_documentdb_instance,
        timeout=timeout,
        interval=interval,
        resource=f"documentdb instance {region}/{instance_id}",
    )
