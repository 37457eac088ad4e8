"""Container trigger fed by an SQS queue or a NATS subject."""

from typing import Any, ClassVar

from pydantic import BaseModel

from ..api.container import (
    ContainerAPI,
    CreateTriggerRequest,
    Trigger,
    TriggerMnqNatsClientConfig,
    TriggerMnqSqsClientConfig,
    UpdateTriggerRequest,
)
from ..conversions import expand_or_generate_name
from ..diff import ChangeSet
from ..errors import ValidationError
from ..locality import expand_id, flatten_id
from ..waiter import status_classifier, wait_for
from .base import RegionalArgs

DEFAULT_TRIGGER_TIMEOUT = 5 * 60

classify_trigger = status_classifier(ready={"ready"}, error={"error"})


class SqsConfig(BaseModel):
    """SQS queue of Scaleway Messaging and Queuing.

    ``namespace_id`` is accepted for compatibility but no longer needed.
    """

    queue: str
    namespace_id: str | None = None
    project_id: str | None = None
    region: str | None = None


class NatsConfig(BaseModel):
    subject: str
    account_id: str | None = None
    project_id: str | None = None
    region: str | None = None


class ContainerTriggerArgs(RegionalArgs):
    default_timeout: ClassVar[float] = DEFAULT_TRIGGER_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = ("container_id", "sqs", "nats", "region")
    computed_fields: ClassVar[tuple[str, ...]] = ("status", "error_message")

    container_id: str
    name: str | None = None
    description: str | None = None
    sqs: SqsConfig | None = None
    nats: NatsConfig | None = None


def validate_trigger_args(args: ContainerTriggerArgs) -> None:
    """Raises ValidationError when both trigger sources are set."""
    if args.sqs is not None and args.nats is not None:
        raise ValidationError('"sqs": conflicts with nats')


def complete_mnq_configs(
    args: ContainerTriggerArgs, region: str, default_project_id: str | None
) -> ContainerTriggerArgs:
    """Fill the project and region of the mnq source with the provider defaults.

    Returns:
        A copy of args, the input is left untouched
    """
    completed = args.model_copy(deep=True)
    for config in (completed.sqs, completed.nats):
        if config is None:
            continue
        if not config.project_id:
            config.project_id = default_project_id
        if not config.region:
            config.region = region
    return completed


def build_create_trigger_request(
    args: ContainerTriggerArgs, region: str, default_project_id: str | None = None
) -> CreateTriggerRequest:
    validate_trigger_args(args)
    args = complete_mnq_configs(args, region, default_project_id)

    req = CreateTriggerRequest(
        name=expand_or_generate_name(args.name, "trigger"),
        container_id=expand_id(args.container_id),
        description=args.description,
    )
    if args.sqs is not None:
        req.scw_sqs_config = TriggerMnqSqsClientConfig(
            queue=args.sqs.queue,
            mnq_project_id=args.sqs.project_id,
            mnq_region=args.sqs.region,
        )
    if args.nats is not None:
        req.scw_nats_config = TriggerMnqNatsClientConfig(
            subject=args.nats.subject,
            mnq_nats_account_id=expand_id(args.nats.account_id) or None,
            mnq_project_id=args.nats.project_id,
            mnq_region=args.nats.region,
        )
    return req


def build_update_trigger_request(
    args: ContainerTriggerArgs, changes: ChangeSet
) -> UpdateTriggerRequest:
    req = UpdateTriggerRequest()
    if changes.has_change("name"):
        req.name = args.name or ""
    if changes.has_change("description"):
        req.description = args.description or ""
    return req


def flatten_trigger(
    trigger: Trigger, region: str, declared: ContainerTriggerArgs
) -> dict[str, Any]:
    outs = declared.to_props()
    outs.update(
        {
            "region": region,
            "container_id": flatten_id(declared.container_id, region, trigger.container_id),
            "name": trigger.name,
            "description": trigger.description or None,
            "status": trigger.status,
            "error_message": trigger.error_message,
        }
    )

    if trigger.scw_sqs_config is not None:
        sqs = trigger.scw_sqs_config
        outs["sqs"] = {
            "queue": sqs.queue,
            "namespace_id": declared.sqs.namespace_id if declared.sqs else None,
            "project_id": sqs.mnq_project_id,
            "region": sqs.mnq_region,
        }
    if trigger.scw_nats_config is not None:
        nats = trigger.scw_nats_config
        outs["nats"] = {
            "subject": nats.subject,
            "account_id": flatten_id(
                declared.nats.account_id if declared.nats else None,
                nats.mnq_region or region,
                nats.mnq_nats_account_id,
            ),
            "project_id": nats.mnq_project_id,
            "region": nats.mnq_region,
        }
    return outs


def wait_for_container_trigger(
    api: ContainerAPI,
    region: str,
    trigger_id: str,
    timeout: float,
    interval: float | None = None,
) -> Trigger:
    return wait_for(
        lambda: api.get_trigger(region, trigger_id),
        classify_trigger,
        timeout=timeout,
        interval=interval,
        resource=f"container trigger {region}/{trigger_id}",
    )
