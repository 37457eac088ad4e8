"""Tests for container triggers."""

import pytest

from scwprovider.api.container import Trigger, TriggerMnqSqsClientConfig
from scwprovider.errors import NotFoundError, ValidationError
from scwprovider.pulumi_providers import ContainerTriggerProvider
from scwprovider.resources import ContainerTriggerArgs
from scwprovider.resources.trigger import (
    build_create_trigger_request,
    build_update_trigger_request,
    validate_trigger_args,
)

CONTAINER_ID = "5f1e1c5a-0d7c-4bd4-a3f0-7f0a9f6f3c11"
PROJECT_ID = "11111111-1111-1111-1111-111111111111"


def _props(**overrides):
    props = {
        "container_id": f"fr-par/{CONTAINER_ID}",
        "name": "on-message",
        "region": "fr-par",
        "sqs": {"queue": "orders"},
    }
    props.update(overrides)
    return props


def _trigger(status="ready", **fields):
    values = {
        "id": "t1",
        "name": "on-message",
        "container_id": CONTAINER_ID,
        "status": status,
        "scw_sqs_config": TriggerMnqSqsClientConfig(
            queue="orders", mnq_project_id=PROJECT_ID, mnq_region="fr-par"
        ),
    }
    values.update(fields)
    return Trigger(**values)


@pytest.fixture
def provider(container_api):
    return ContainerTriggerProvider(api_factory=lambda: container_api)


def test_sqs_and_nats_conflict():
    args = ContainerTriggerArgs.from_props(_props(nats={"subject": "orders"}))

    with pytest.raises(ValidationError, match='"sqs": conflicts with nats'):
        validate_trigger_args(args)


def test_create_request_defaults_mnq_project_and_region():
    """Test a missing mnq project and region fall back to the provider defaults."""
    args = ContainerTriggerArgs.from_props(_props(region="nl-ams"))

    req = build_create_trigger_request(args, "nl-ams", PROJECT_ID)

    assert req.container_id == CONTAINER_ID
    assert req.scw_sqs_config.mnq_project_id == PROJECT_ID
    assert req.scw_sqs_config.mnq_region == "nl-ams"
    assert req.scw_nats_config is None
    assert args.sqs.project_id is None


def test_create_request_nats():
    args = ContainerTriggerArgs.from_props(
        _props(sqs=None, nats={"subject": "jobs", "account_id": "fr-par/acc", "region": "fr-par"})
    )

    req = build_create_trigger_request(args, "fr-par", PROJECT_ID)

    assert req.scw_nats_config.subject == "jobs"
    assert req.scw_nats_config.mnq_nats_account_id == "acc"


def test_update_request_name_and_description():
    old = _props(description="a")
    new = _props(name="renamed")
    args = ContainerTriggerArgs.from_props(new)

    req = build_update_trigger_request(args, ContainerTriggerArgs.changes(old, new))

    assert req.model_fields_set == {"name", "description"}
    assert req.name == "renamed"
    assert req.description == ""


def test_check_rejects_both_sources(provider):
    result = provider.check({}, _props(nats={"subject": "orders"}))

    assert len(result.failures) == 1
    assert "conflicts with nats" in result.failures[0].reason


def test_check_completes_mnq_config(provider):
    result = provider.check({}, _props())

    assert result.failures == []
    assert result.inputs["sqs"]["project_id"] == PROJECT_ID
    assert result.inputs["sqs"]["region"] == "fr-par"


def test_sqs_change_replaces(provider):
    result = provider.diff("fr-par/t1", _props(), _props(sqs={"queue": "other"}))

    assert result.replaces == ["sqs"]


def test_create(provider, container_api):
    container_api.create_trigger.return_value = _trigger(status="creating")
    container_api.get_trigger.side_effect = [_trigger(status="creating"), _trigger()]

    result = provider.create(_props())

    assert result.id == "fr-par/t1"
    assert result.outs["container_id"] == f"fr-par/{CONTAINER_ID}"
    assert result.outs["sqs"]["queue"] == "orders"
    assert result.outs["status"] == "ready"


def test_read_error_state_is_a_warning(provider, container_api, caplog):
    """Test reading a trigger in error state succeeds and logs a warning."""
    container_api.get_trigger.return_value = _trigger(
        status="error", error_message="queue does not exist"
    )

    with caplog.at_level("WARNING"):
        result = provider.read("fr-par/t1", _props())

    assert result.id == "fr-par/t1"
    assert result.outs["status"] == "error"
    assert "Trigger in error state" in caplog.text


def test_update_without_input_change_skips_api_call(provider, container_api):
    container_api.get_trigger.return_value = _trigger()

    provider.update("fr-par/t1", _props(), _props(timeouts={"update": 60}))

    container_api.update_trigger.assert_not_called()


def test_delete_tolerates_not_found(provider, container_api):
    container_api.get_trigger.side_effect = NotFoundError()

    provider.delete("fr-par/t1", _props())

    container_api.delete_trigger.assert_not_called()
