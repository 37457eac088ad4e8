"""Tests for settings, diagnostics and shared provider helpers."""

import pytest

from scwprovider.diagnostics import Diagnostics, Severity
from scwprovider.errors import NotFoundError, ProviderError, is_not_found
from scwprovider.pulumi_providers.base import resource_props
from scwprovider.resources import ContainerArgs, Timeouts
from scwprovider.settings import ProviderSettings, get_settings, reload_settings


def test_settings_from_environment(monkeypatch):
    """Test SCW_ variables are read, as with the Scaleway CLI."""
    monkeypatch.setenv("SCW_SECRET_KEY", "s3cr3t")
    monkeypatch.setenv("SCW_DEFAULT_REGION", "nl-ams")
    monkeypatch.setenv("SCW_POLL_INTERVAL", "2.5")

    settings = reload_settings()

    assert settings.secret_key == "s3cr3t"
    assert settings.default_region == "nl-ams"
    assert settings.poll_interval == 2.5
    assert get_settings() is settings


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("SCW_DEFAULT_REGION", raising=False)
    monkeypatch.delenv("SCW_POLL_INTERVAL", raising=False)

    settings = ProviderSettings(_env_file=None)

    assert settings.default_region == "fr-par"
    assert settings.api_url == "https://api.scaleway.com"
    assert settings.poll_interval == 5.0
    assert settings.http_max_retries == 3


def test_diagnostics_split():
    diagnostics = Diagnostics()
    diagnostics.warning("Trigger in error state", "queue missing")
    diagnostics.error("create failed")

    assert diagnostics.has_error()
    assert [d.severity for d in diagnostics.errors] == [Severity.ERROR]
    assert str(diagnostics.warnings[0]) == "warning: Trigger in error state: queue missing"


def test_provider_error_message():
    diagnostics = Diagnostics.from_error(NotFoundError())

    err = ProviderError(diagnostics)

    assert str(err) == "error: scaleway-sdk: http error 404: resource is not found"
    assert err.diagnostics == diagnostics


def test_is_not_found():
    assert is_not_found(NotFoundError())
    assert not is_not_found(ValueError())


def test_operation_timeout():
    """Test per-operation timeouts fall back to the resource default."""
    args = ContainerArgs(namespace_id="ns", timeouts=Timeouts(create=60))

    assert args.operation_timeout("create") == 60
    assert args.operation_timeout("delete") == ContainerArgs.default_timeout


@pytest.mark.parametrize("as_model", [True, False])
def test_resource_props_declares_computed_outputs(as_model):
    args = {"namespace_id": "ns", "name": "app"}
    if as_model:
        args = ContainerArgs(**args)

    props = resource_props(ContainerArgs, args)

    assert props["namespace_id"] == "ns"
    assert props["status"] is None
    assert props["domain_name"] is None
