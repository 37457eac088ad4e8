"""Managed DocumentDB API (instances and their endpoints)."""

from .client import ApiModel, ScalewayClient


class EndpointPrivateNetworkDetails(ApiModel):
    private_network_id: str
    service_ip: str | None = None
    zone: str | None = None


class Endpoint(ApiModel):
    id: str
    ip: str | None = None
    port: int | None = None
    name: str | None = None
    hostname: str | None = None
    private_network: EndpointPrivateNetworkDetails | None = None


class Instance(ApiModel):
    id: str
    name: str = ""
    status: str = "unknown"
    region: str | None = None
    endpoints: list[Endpoint] = []


class EndpointSpecPrivateNetworkIpamConfig(ApiModel):
    pass


class EndpointSpecPrivateNetwork(ApiModel):
    private_network_id: str
    service_ip: str | None = None
    ipam_config: EndpointSpecPrivateNetworkIpamConfig | None = None


class EndpointSpec(ApiModel):
    private_network: EndpointSpecPrivateNetwork | None = None


class CreateEndpointRequest(ApiModel):
    instance_id: str
    endpoint_spec: EndpointSpec


class DocumentDBAPI:
    """DocumentDB endpoints, regional."""

    def __init__(self, client: ScalewayClient):
        self.client = client

    @staticmethod
    def _base(region: str) -> str:
        return f"/document-db/v1beta1/regions/{region}"

    def get_instance(self, region: str, instance_id: str) -> Instance:
        data = self.client.get(f"{self._base(region)}/instances/{instance_id}")
        return Instance.from_response(data)

    def create_endpoint(self, region: str, req: CreateEndpointRequest) -> Endpoint:
        data = self.client.post(
            f"{self._base(region)}/instances/{req.instance_id}/endpoints",
            json={"endpoint_spec": req.endpoint_spec.model_dump(mode="json", exclude_none=True)},
        )
        return Endpoint.from_response(data)

    def get_endpoint(self, region: str, endpoint_id: str) -> Endpoint:
        data = self.client.get(f"{self._base(region)}/endpoints/{endpoint_id}")
        return Endpoint.from_response(data)

    def migrate_endpoint(self, region: str, endpoint_id: str, instance_id: str) -> Endpoint:
        data = self.client.post(
            f"{self._base(region)}/endpoints/{endpoint_id}/migrate",
            json={"instance_id": instance_id},
        )
        return Endpoint.from_response(data)

    def delete_endpoint(self, region: str, endpoint_id: str) -> None:
        self.client.delete(f"{self._base(region)}/endpoints/{endpoint_id}")
