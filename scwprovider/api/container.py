"""Serverless Containers API (containers, triggers, custom domains)."""

from .client import ApiModel, ScalewayClient


class Secret(ApiModel):
    key: str
    value: str | None = None


class SecretHashedValue(ApiModel):
    key: str
    hashed_value: str


class ContainerHealthCheckSpecHTTPProbe(ApiModel):
    path: str = ""


class ContainerHealthCheckSpec(ApiModel):
    http: ContainerHealthCheckSpecHTTPProbe | None = None
    failure_threshold: int = 0
    interval: str | None = None


class ContainerScalingOption(ApiModel):
    concurrent_requests_threshold: int | None = None
    cpu_usage_threshold: int | None = None
    memory_usage_threshold: int | None = None


class Container(ApiModel):
    id: str
    name: str = ""
    namespace_id: str = ""
    status: str = "unknown"
    cron_status: str | None = None
    environment_variables: dict[str, str] = {}
    secret_environment_variables: list[SecretHashedValue] = []
    min_scale: int | None = None
    max_scale: int | None = None
    memory_limit: int | None = None
    cpu_limit: int | None = None
    timeout: str | None = None
    error_message: str | None = None
    privacy: str | None = None
    description: str | None = None
    registry_image: str | None = None
    max_concurrency: int | None = None
    domain_name: str | None = None
    protocol: str | None = None
    port: int | None = None
    http_option: str | None = None
    sandbox: str | None = None
    local_storage_limit: int | None = None
    scaling_option: ContainerScalingOption | None = None
    health_check: ContainerHealthCheckSpec | None = None
    tags: list[str] = []
    command: list[str] = []
    args: list[str] = []
    private_network_id: str | None = None
    region: str | None = None


class CreateContainerRequest(ApiModel):
    namespace_id: str
    name: str
    environment_variables: dict[str, str] | None = None
    secret_environment_variables: list[Secret] | None = None
    min_scale: int | None = None
    max_scale: int | None = None
    memory_limit: int | None = None
    cpu_limit: int | None = None
    timeout: str | None = None
    privacy: str | None = None
    description: str | None = None
    registry_image: str | None = None
    max_concurrency: int | None = None
    protocol: str | None = None
    port: int | None = None
    http_option: str | None = None
    sandbox: str | None = None
    health_check: ContainerHealthCheckSpec | None = None
    scaling_option: ContainerScalingOption | None = None
    local_storage_limit: int | None = None
    tags: list[str] | None = None
    command: list[str] | None = None
    args: list[str] | None = None
    private_network_id: str | None = None


class UpdateContainerRequest(ApiModel):
    """Partial update, only fields explicitly assigned are sent."""

    environment_variables: dict[str, str] | None = None
    secret_environment_variables: list[Secret] | None = None
    min_scale: int | None = None
    max_scale: int | None = None
    memory_limit: int | None = None
    cpu_limit: int | None = None
    timeout: str | None = None
    redeploy: bool | None = None
    privacy: str | None = None
    description: str | None = None
    registry_image: str | None = None
    max_concurrency: int | None = None
    protocol: str | None = None
    port: int | None = None
    http_option: str | None = None
    sandbox: str | None = None
    health_check: ContainerHealthCheckSpec | None = None
    scaling_option: ContainerScalingOption | None = None
    local_storage_limit: int | None = None
    tags: list[str] | None = None
    command: list[str] | None = None
    args: list[str] | None = None
    private_network_id: str | None = None


class TriggerMnqSqsClientConfig(ApiModel):
    queue: str
    mnq_project_id: str | None = None
    mnq_region: str | None = None
    mnq_namespace_id: str | None = None


class TriggerMnqNatsClientConfig(ApiModel):
    subject: str
    mnq_nats_account_id: str | None = None
    mnq_project_id: str | None = None
    mnq_region: str | None = None


class Trigger(ApiModel):
    id: str
    name: str = ""
    description: str = ""
    container_id: str = ""
    input_type: str | None = None
    status: str = "unknown_status"
    error_message: str | None = None
    scw_sqs_config: TriggerMnqSqsClientConfig | None = None
    scw_nats_config: TriggerMnqNatsClientConfig | None = None


class CreateTriggerRequest(ApiModel):
    name: str
    container_id: str
    description: str | None = None
    scw_sqs_config: TriggerMnqSqsClientConfig | None = None
    scw_nats_config: TriggerMnqNatsClientConfig | None = None


class UpdateTriggerRequest(ApiModel):
    name: str | None = None
    description: str | None = None


class Domain(ApiModel):
    id: str
    hostname: str = ""
    container_id: str = ""
    url: str = ""
    status: str = "unknown"
    error_message: str | None = None


class CreateDomainRequest(ApiModel):
    hostname: str
    container_id: str


class ContainerAPI:
    """Serverless Containers endpoints, regional."""

    def __init__(self, client: ScalewayClient):
        self.client = client

    @staticmethod
    def _base(region: str) -> str:
        return f"/containers/v1beta1/regions/{region}"

    # Containers

    def get_container(self, region: str, container_id: str) -> Container:
        data = self.client.get(f"{self._base(region)}/containers/{container_id}")
        return Container.from_response(data)

    def create_container(self, region: str, req: CreateContainerRequest) -> Container:
        data = self.client.post(
            f"{self._base(region)}/containers",
            json=req.model_dump(mode="json", exclude_none=True),
        )
        return Container.from_response(data)

    def update_container(
        self, region: str, container_id: str, req: UpdateContainerRequest
    ) -> Container:
        data = self.client.patch(
            f"{self._base(region)}/containers/{container_id}",
            json=req.model_dump(mode="json", exclude_unset=True),
        )
        return Container.from_response(data)

    def deploy_container(self, region: str, container_id: str) -> Container:
        data = self.client.post(f"{self._base(region)}/containers/{container_id}/deploy")
        return Container.from_response(data)

    def delete_container(self, region: str, container_id: str) -> Container:
        data = self.client.delete(f"{self._base(region)}/containers/{container_id}")
        return Container.from_response(data)

    # Triggers

    def get_trigger(self, region: str, trigger_id: str) -> Trigger:
        data = self.client.get(f"{self._base(region)}/triggers/{trigger_id}")
        return Trigger.from_response(data)

    def create_trigger(self, region: str, req: CreateTriggerRequest) -> Trigger:
        data = self.client.post(
            f"{self._base(region)}/triggers",
            json=req.model_dump(mode="json", exclude_none=True),
        )
        return Trigger.from_response(data)

    def update_trigger(
        self, region: str, trigger_id: str, req: UpdateTriggerRequest
    ) -> Trigger:
        data = self.client.patch(
            f"{self._base(region)}/triggers/{trigger_id}",
            json=req.model_dump(mode="json", exclude_unset=True),
        )
        return Trigger.from_response(data)

    def delete_trigger(self, region: str, trigger_id: str) -> Trigger:
        data = self.client.delete(f"{self._base(region)}/triggers/{trigger_id}")
        return Trigger.from_response(data)

    # Domains

    def get_domain(self, region: str, domain_id: str) -> Domain:
        data = self.client.get(f"{self._base(region)}/domains/{domain_id}")
        return Domain.from_response(data)

    def create_domain(self, region: str, req: CreateDomainRequest) -> Domain:
        data = self.client.post(f"{self._base(region)}/domains", json=req.model_dump(mode="json"))
        return Domain.from_response(data)

    def delete_domain(self, region: str, domain_id: str) -> Domain:
        data = self.client.delete(f"{self._base(region)}/domains/{domain_id}")
        return Domain.from_response(data)
