"""Tests for the container dynamic provider."""

import httpx
import pytest

from scwprovider.api import ScalewayClient
from scwprovider.api.container import Container
from scwprovider.errors import NotFoundError, ProviderError
from scwprovider.pulumi_providers import ContainerProvider
from scwprovider.resources import ContainerArgs
from scwprovider.resources.container import build_update_container_request, flatten_container

NAMESPACE_ID = "8d6f3f3e-9d43-4b7b-a0c3-6d8b1fd1f6b2"


def _container(status="ready", **fields):
    values = {"id": "c1", "name": "app", "namespace_id": NAMESPACE_ID, "status": status}
    values.update(fields)
    return Container(**values)


def _props(**overrides):
    props = {"namespace_id": f"fr-par/{NAMESPACE_ID}", "name": "app", "region": "fr-par"}
    props.update(overrides)
    return props


@pytest.fixture
def provider(container_api):
    return ContainerProvider(api_factory=lambda: container_api)


class TestCheck:
    """Tests for input validation and defaults."""

    def test_fills_region_and_generated_name(self, provider):
        result = provider.check({}, {"namespace_id": NAMESPACE_ID})

        assert result.failures == []
        assert result.inputs["region"] == "fr-par"
        assert result.inputs["name"].startswith("scw-co-")

    def test_reuses_name_from_state(self, provider):
        """Test a generated name stays stable across runs."""
        result = provider.check({"name": "scw-co-1234abcd"}, {"namespace_id": NAMESPACE_ID})

        assert result.inputs["name"] == "scw-co-1234abcd"

    def test_missing_required_field(self, provider):
        result = provider.check({}, {"name": "app"})

        assert [failure.property for failure in result.failures] == ["namespace_id"]

    def test_two_scaling_thresholds_fail(self, provider):
        news = _props(scaling_option={"cpu_usage_threshold": 50, "memory_usage_threshold": 50})

        result = provider.check({}, news)

        assert len(result.failures) == 1
        assert "a maximum of one scaling option can be set" in result.failures[0].reason


class TestDiff:
    def test_no_change(self, provider):
        result = provider.diff("fr-par/c1", _props(status="ready"), _props())

        assert result.changes is False
        assert result.replaces == []

    def test_in_place_change(self, provider):
        result = provider.diff("fr-par/c1", _props(), _props(description="new"))

        assert result.changes is True
        assert result.replaces == []

    def test_name_change_replaces(self, provider):
        result = provider.diff("fr-par/c1", _props(), _props(name="other"))

        assert result.replaces == ["name"]
        assert result.delete_before_replace is True

    def test_server_side_image_is_not_a_change(self, provider):
        """Test an image filled in by the API is kept when none is declared."""
        news = provider.check({}, {"namespace_id": NAMESPACE_ID}).inputs
        remote = _container(name=news["name"], registry_image="rg.fr-par.scw.cloud/ns/app:latest")
        olds = flatten_container(remote, "fr-par", ContainerArgs.from_props(news))
        news = provider.check(olds, {"namespace_id": NAMESPACE_ID}).inputs

        result = provider.diff("fr-par/c1", olds, news)

        assert result.changes is False
        req = build_update_container_request(
            ContainerArgs.from_props(news), ContainerArgs.changes(olds, news)
        )
        assert "registry_image" not in req.model_fields_set


def test_create_deploys_and_waits(provider, container_api):
    """Test create, deploy, then poll until ready."""
    container_api.create_container.return_value = _container(status="created")
    container_api.get_container.side_effect = [
        _container(status="pending"),
        _container(status="ready", domain_name="app.example.scw.cloud"),
    ]

    result = provider.create(_props(deploy=True))

    assert result.id == "fr-par/c1"
    assert result.outs["status"] == "ready"
    assert result.outs["domain_name"] == "app.example.scw.cloud"
    assert result.outs["namespace_id"] == f"fr-par/{NAMESPACE_ID}"
    container_api.deploy_container.assert_called_once_with("fr-par", "c1")
    assert container_api.get_container.call_count == 2


def test_create_without_deploy(provider, container_api):
    container_api.create_container.return_value = _container(status="created")
    container_api.get_container.return_value = _container(status="created")

    provider.create(_props())

    container_api.deploy_container.assert_not_called()


def test_create_error_status_raises(provider, container_api):
    container_api.create_container.return_value = _container(status="pending")
    container_api.get_container.return_value = _container(
        status="error", error_message="image not found"
    )

    with pytest.raises(ProviderError) as exc_info:
        provider.create(_props())

    assert "image not found" in str(exc_info.value)


def test_read_not_found_clears_state(provider, container_api):
    container_api.get_container.side_effect = NotFoundError()

    result = provider.read("fr-par/c1", _props())

    assert result.id == ""
    assert result.outs == {}


def test_read_flattens(provider, container_api):
    container_api.get_container.return_value = _container(memory_limit=256)

    result = provider.read("fr-par/c1", _props())

    assert result.id == "fr-par/c1"
    assert result.outs["memory_limit"] == 256


def test_update_sends_only_changes(provider, container_api):
    container_api.get_container.return_value = _container()

    provider.update("fr-par/c1", _props(description="old"), _props(description="new"))

    region, container_id, req = container_api.update_container.call_args[0]
    assert (region, container_id) == ("fr-par", "c1")
    assert req.model_fields_set == {"description"}


def test_delete_waits_for_not_found(provider, container_api):
    container_api.get_container.side_effect = [
        _container(),
        _container(status="deleting"),
        NotFoundError(),
    ]

    provider.delete("fr-par/c1", _props())

    container_api.delete_container.assert_called_once_with("fr-par", "c1")
    assert container_api.get_container.call_count == 3


def test_delete_already_gone(provider, container_api):
    container_api.get_container.side_effect = NotFoundError()

    provider.delete("fr-par/c1", _props())

    container_api.delete_container.assert_not_called()


def test_invalid_id_raises_provider_error(provider):
    with pytest.raises(ProviderError, match="cant parse localized id"):
        provider.read("c1", _props())


class TestClientLifetime:
    """Tests for the HTTP client owned by each operation."""

    @pytest.fixture
    def clients(self, monkeypatch):
        opened = []

        def open_client(handler):
            def from_settings(settings=None, transport=None):
                client = ScalewayClient(
                    api_url="https://api.example.test",
                    backoff_factor=0,
                    transport=httpx.MockTransport(handler),
                )
                opened.append(client)
                return client

            monkeypatch.setattr(ScalewayClient, "from_settings", from_settings)
            return opened

        return open_client

    def test_closed_after_operation(self, clients):
        body = {"id": "c1", "name": "app", "namespace_id": NAMESPACE_ID, "status": "ready"}
        opened = clients(lambda request: httpx.Response(200, json=body))

        result = ContainerProvider().read("fr-par/c1", _props())

        assert result.outs["status"] == "ready"
        assert len(opened) == 1
        assert opened[0]._http.is_closed

    def test_closed_when_operation_fails(self, clients):
        opened = clients(lambda request: httpx.Response(403, json={"message": "forbidden"}))

        with pytest.raises(ProviderError, match="forbidden"):
            ContainerProvider().delete("fr-par/c1", _props())

        assert opened[0]._http.is_closed

    def test_unexpected_payload_is_a_provider_error(self, clients):
        clients(lambda request: httpx.Response(200, json={"status": "ready"}))

        with pytest.raises(ProviderError, match="unexpected Container payload"):
            ContainerProvider().read("fr-par/c1", _props())
