"""Apple silicon API (servers and their private networks)."""

from .client import ApiModel, ScalewayClient


class Server(ApiModel):
    id: str
    type: str = ""
    name: str = ""
    project_id: str = ""
    organization_id: str = ""
    ip: str | None = None
    vnc_url: str | None = None
    status: str = "unknown_status"
    vpc_status: str | None = None
    zone: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    deletable_at: str | None = None


class ServerPrivateNetwork(ApiModel):
    id: str
    server_id: str = ""
    private_network_id: str
    project_id: str = ""
    vlan: int | None = None
    status: str = "unknown_status"
    ipam_ip_ids: list[str] = []
    created_at: str | None = None
    updated_at: str | None = None


class CreateServerRequest(ApiModel):
    name: str
    type: str
    project_id: str | None = None
    enable_vpc: bool = False


class UpdateServerRequest(ApiModel):
    """Partial update, only fields explicitly assigned are sent."""

    name: str | None = None
    enable_vpc: bool | None = None


class AppleSiliconAPI:
    """Apple silicon endpoints, zonal."""

    def __init__(self, client: ScalewayClient):
        self.client = client

    @staticmethod
    def _base(zone: str) -> str:
        return f"/apple-silicon/v1alpha1/zones/{zone}"

    def get_server(self, zone: str, server_id: str) -> Server:
        data = self.client.get(f"{self._base(zone)}/servers/{server_id}")
        return Server.from_response(data)

    def create_server(self, zone: str, req: CreateServerRequest) -> Server:
        data = self.client.post(
            f"{self._base(zone)}/servers",
            json=req.model_dump(mode="json", exclude_none=True),
        )
        return Server.from_response(data)

    def update_server(self, zone: str, server_id: str, req: UpdateServerRequest) -> Server:
        data = self.client.patch(
            f"{self._base(zone)}/servers/{server_id}",
            json=req.model_dump(mode="json", exclude_unset=True),
        )
        return Server.from_response(data)

    def delete_server(self, zone: str, server_id: str) -> None:
        self.client.delete(f"{self._base(zone)}/servers/{server_id}")

    def set_server_private_networks(
        self, zone: str, server_id: str, per_private_network_ipam_ip_ids: dict[str, list[str]]
    ) -> list[ServerPrivateNetwork]:
        data = self.client.put(
            f"{self._base(zone)}/servers/{server_id}/private-networks",
            json={"per_private_network_ipam_ip_ids": per_private_network_ipam_ip_ids},
        )
        return [
            ServerPrivateNetwork.from_response(item)
            for item in data.get("server_private_networks", [])
        ]

    def list_server_private_networks(
        self, zone: str, server_id: str
    ) -> list[ServerPrivateNetwork]:
        data = self.client.get(
            f"{self._base(zone)}/server-private-networks",
            params={"server_id": server_id},
        )
        return [
            ServerPrivateNetwork.from_response(item)
            for item in data.get("server_private_networks", [])
        ]
