"""Tests for container custom domains."""

from unittest.mock import patch

import pytest

from scwprovider.api.container import Domain
from scwprovider.errors import NotFoundError, ProviderError, ResponseError
from scwprovider.pulumi_providers import ContainerDomainProvider
from scwprovider.resources.domain import is_container_dns_resolve_error

CONTAINER_ID = "5f1e1c5a-0d7c-4bd4-a3f0-7f0a9f6f3c11"


def _props(**overrides):
    props = {"container_id": CONTAINER_ID, "hostname": "app.example.com", "region": "fr-par"}
    props.update(overrides)
    return props


def _domain(status="ready"):
    return Domain(
        id="d1",
        hostname="app.example.com",
        container_id=CONTAINER_ID,
        url="https://app.example.com",
        status=status,
    )


def _dns_error():
    return ResponseError(400, "could not validate domain app.example.com: CNAME not found")


@pytest.fixture
def provider(container_api):
    return ContainerDomainProvider(api_factory=lambda: container_api)


def test_is_container_dns_resolve_error():
    assert is_container_dns_resolve_error(_dns_error())
    assert not is_container_dns_resolve_error(ResponseError(400, "invalid hostname"))
    assert not is_container_dns_resolve_error(ValueError("could not validate domain"))


def test_create_retries_until_dns_propagates(provider, container_api):
    """Test creation is retried while the CNAME does not resolve."""
    container_api.create_domain.side_effect = [_dns_error(), _dns_error(), _domain("pending")]
    container_api.get_domain.return_value = _domain()

    with patch("scwprovider.resources.domain.DEFAULT_CONTAINER_RETRY_INTERVAL", 0):
        result = provider.create(_props())

    assert result.id == "fr-par/d1"
    assert result.outs["url"] == "https://app.example.com"
    assert result.outs["container_id"] == CONTAINER_ID
    assert container_api.create_domain.call_count == 3


def test_create_other_error_is_not_retried(provider, container_api):
    container_api.create_domain.side_effect = ResponseError(403, "forbidden")

    with pytest.raises(ProviderError, match="forbidden"):
        provider.create(_props())

    assert container_api.create_domain.call_count == 1


def test_create_gives_up_after_timeout(provider, container_api):
    """Test the DNS error of the last attempt surfaces once the timeout elapsed."""
    container_api.create_domain.side_effect = _dns_error()

    with pytest.raises(ProviderError, match="could not validate domain"):
        provider.create(_props(timeouts={"create": 0}))

    assert container_api.create_domain.call_count == 2


def test_hostname_change_replaces(provider):
    result = provider.diff("fr-par/d1", _props(), _props(hostname="www.example.com"))

    assert result.replaces == ["hostname"]


def test_read_not_found(provider, container_api):
    container_api.get_domain.side_effect = NotFoundError()

    assert provider.read("fr-par/d1", _props()).id == ""


def test_delete(provider, container_api):
    container_api.get_domain.return_value = _domain()

    provider.delete("fr-par/d1", _props())

    container_api.delete_domain.assert_called_once_with("fr-par", "d1")
