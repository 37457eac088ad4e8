"""Apple silicon server and its private network attachments."""

from typing import Any, ClassVar

from pydantic import BaseModel, field_validator

from ..api.applesilicon import (
    AppleSiliconAPI,
    CreateServerRequest,
    Server,
    ServerPrivateNetwork,
    UpdateServerRequest,
)
from ..conversions import expand_or_generate_name
from ..diff import ChangeSet
from ..locality import expand_id, new_id_string, new_id_strings, region_of_zone
from ..waiter import WaitStatus, status_classifier, wait_for
from .base import ZonalArgs

DEFAULT_APPLE_SILICON_SERVER_TIMEOUT = 2 * 60 * 60

classify_server = status_classifier(ready={"ready"}, error={"error", "locked"})


class ServerPrivateNetworkArgs(BaseModel):
    """One private network attachment.

    Two attachments are equal when they designate the same network and, if
    both list IPAM IPs, the same IPs. ``vlan``, ``status``, ``created_at`` and
    ``updated_at`` are filled in by the API and ignored by the comparison.
    """

    id: str
    ipam_ip_ids: list[str] | None = None
    vlan: int | None = None
    status: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServerPrivateNetworkArgs):
            return NotImplemented
        if expand_id(self.id) != expand_id(other.id):
            return False
        if self.ipam_ip_ids and other.ipam_ip_ids:
            return sorted(map(expand_id, self.ipam_ip_ids)) == sorted(
                map(expand_id, other.ipam_ip_ids)
            )
        return True


class AppleSiliconServerArgs(ZonalArgs):
    default_timeout: ClassVar[float] = DEFAULT_APPLE_SILICON_SERVER_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = ("type", "project_id", "zone")
    computed_fields: ClassVar[tuple[str, ...]] = (
        "ip",
        "vnc_url",
        "status",
        "vpc_status",
        "organization_id",
        "created_at",
        "updated_at",
        "deletable_at",
    )
    optional_computed_fields: ClassVar[tuple[str, ...]] = ("project_id",)

    type: str
    name: str | None = None
    project_id: str | None = None
    enable_vpc: bool = False
    private_network: list[ServerPrivateNetworkArgs] | None = None

    @field_validator("private_network")
    @classmethod
    def _sort_private_networks(
        cls, value: list[ServerPrivateNetworkArgs] | None
    ) -> list[ServerPrivateNetworkArgs] | None:
        if value is None:
            return None
        return sorted(value, key=lambda network: expand_id(network.id))


def expand_private_networks(
    networks: list[ServerPrivateNetworkArgs] | None,
) -> dict[str, list[str]]:
    """Attachments -> ``{private_network_id: [ipam_ip_id, ...]}``."""
    expanded = {}
    for network in networks or []:
        expanded[expand_id(network.id)] = [expand_id(ip) for ip in network.ipam_ip_ids or []]
    return expanded


def flatten_private_networks(
    region: str, networks: list[ServerPrivateNetwork]
) -> list[dict[str, Any]] | None:
    if not networks:
        return None
    flattened = [
        {
            "id": new_id_string(region, network.private_network_id),
            "ipam_ip_ids": new_id_strings(region, network.ipam_ip_ids),
            "vlan": network.vlan,
            "status": network.status,
            "created_at": network.created_at,
            "updated_at": network.updated_at,
        }
        for network in networks
    ]
    return sorted(flattened, key=lambda network: expand_id(network["id"]))


def build_create_server_request(
    args: AppleSiliconServerArgs, default_project_id: str | None = None
) -> CreateServerRequest:
    return CreateServerRequest(
        name=expand_or_generate_name(args.name, "as"),
        type=args.type,
        project_id=args.project_id or default_project_id,
        enable_vpc=args.enable_vpc,
    )


def build_update_server_request(
    args: AppleSiliconServerArgs, changes: ChangeSet
) -> UpdateServerRequest:
    req = UpdateServerRequest()
    if changes.has_change("name"):
        req.name = args.name or ""
    if changes.has_change("enable_vpc"):
        req.enable_vpc = args.enable_vpc
    return req


def flatten_server(
    server: Server,
    zone: str,
    networks: list[ServerPrivateNetwork],
    declared: AppleSiliconServerArgs,
) -> dict[str, Any]:
    outs = declared.to_props()
    outs.update(
        {
            "zone": zone,
            "type": server.type,
            "name": server.name,
            "project_id": server.project_id,
            "organization_id": server.organization_id,
            "ip": server.ip,
            "vnc_url": server.vnc_url,
            "status": server.status,
            "vpc_status": server.vpc_status,
            "created_at": server.created_at,
            "updated_at": server.updated_at,
            "deletable_at": server.deletable_at,
            "private_network": flatten_private_networks(region_of_zone(zone), networks),
        }
    )
    return outs


def wait_for_apple_silicon_server(
    api: AppleSiliconAPI,
    zone: str,
    server_id: str,
    timeout: float,
    interval: float | None = None,
) -> Server:
    return wait_for(
        lambda: api.get_server(zone, server_id),
        classify_server,
        timeout=timeout,
        interval=interval,
        resource=f"apple silicon server {zone}/{server_id}",
    )


def classify_private_networks(networks: list[ServerPrivateNetwork]) -> WaitStatus:
    statuses = {network.status for network in networks}
    if statuses & {"error", "locked"}:
        return WaitStatus.ERROR
    if statuses <= {"attached"}:
        return WaitStatus.READY
    return WaitStatus.PENDING


def wait_for_server_private_networks(
    api: AppleSiliconAPI,
    zone: str,
    server_id: str,
    timeout: float,
    interval: float | None = None,
) -> list[ServerPrivateNetwork]:
    return wait_for(
        lambda: api.list_server_private_networks(zone, server_id),
        classify_private_networks,
        timeout=timeout,
        interval=interval,
        resource=f"private networks of apple silicon server {zone}/{server_id}",
    )
