"""Managed Inference API (deployments and their endpoints)."""

from .client import ApiModel, ScalewayClient


class EndpointSpecPublic(ApiModel):
    pass


class EndpointSpecPrivateNetwork(ApiModel):
    private_network_id: str


class EndpointSpec(ApiModel):
    public: EndpointSpecPublic | None = None
    private_network: EndpointSpecPrivateNetwork | None = None
    disable_auth: bool = False


class EndpointPublicDetails(ApiModel):
    pass


class EndpointPrivateNetworkDetails(ApiModel):
    private_network_id: str


class Endpoint(ApiModel):
    id: str
    url: str = ""
    public: EndpointPublicDetails | None = None
    private_network: EndpointPrivateNetworkDetails | None = None
    disable_auth: bool = False


class Deployment(ApiModel):
    id: str
    name: str = ""
    project_id: str = ""
    status: str = "unknown_status"
    tags: list[str] = []
    node_type: str = ""
    model_name: str = ""
    min_size: int | None = None
    max_size: int | None = None
    size: int | None = None
    endpoints: list[Endpoint] = []
    error_message: str | None = None
    region: str | None = None


class CreateDeploymentRequest(ApiModel):
    name: str
    project_id: str | None = None
    model_name: str
    node_type: str
    accept_eula: bool | None = None
    tags: list[str] | None = None
    min_size: int | None = None
    max_size: int | None = None
    endpoints: list[EndpointSpec] = []


class UpdateDeploymentRequest(ApiModel):
    """Partial update, only fields explicitly assigned are sent."""

    name: str | None = None
    tags: list[str] | None = None
    min_size: int | None = None
    max_size: int | None = None


class CreateEndpointRequest(ApiModel):
    deployment_id: str
    endpoint: EndpointSpec


class UpdateEndpointRequest(ApiModel):
    disable_auth: bool | None = None


class InferenceAPI:
    """Inference endpoints, regional."""

    def __init__(self, client: ScalewayClient):
        self.client = client

    @staticmethod
    def _base(region: str) -> str:
        return f"/inference/v1beta1/regions/{region}"

    def get_deployment(self, region: str, deployment_id: str) -> Deployment:
        data = self.client.get(f"{self._base(region)}/deployments/{deployment_id}")
        return Deployment.from_response(data)

    def create_deployment(self, region: str, req: CreateDeploymentRequest) -> Deployment:
        data = self.client.post(
            f"{self._base(region)}/deployments",
            json=req.model_dump(mode="json", exclude_none=True),
        )
        return Deployment.from_response(data)

    def update_deployment(
        self, region: str, deployment_id: str, req: UpdateDeploymentRequest
    ) -> Deployment:
        data = self.client.patch(
            f"{self._base(region)}/deployments/{deployment_id}",
            json=req.model_dump(mode="json", exclude_unset=True),
        )
        return Deployment.from_response(data)

    def delete_deployment(self, region: str, deployment_id: str) -> Deployment:
        data = self.client.delete(f"{self._base(region)}/deployments/{deployment_id}")
        return Deployment.from_response(data)

    def create_endpoint(self, region: str, req: CreateEndpointRequest) -> Endpoint:
        data = self.client.post(
            f"{self._base(region)}/endpoints",
            json=req.model_dump(mode="json", exclude_none=True),
        )
        return Endpoint.from_response(data)

    def update_endpoint(
        self, region: str, endpoint_id: str, req: UpdateEndpointRequest
    ) -> Endpoint:
        data = self.client.patch(
            f"{self._base(region)}/endpoints/{endpoint_id}",
            json=req.model_dump(mode="json", exclude_unset=True),
        )
        return Endpoint.from_response(data)

    def delete_endpoint(self, region: str, endpoint_id: str) -> None:
        self.client.delete(f"{self._base(region)}/endpoints/{endpoint_id}")
