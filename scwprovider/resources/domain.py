"""Custom domain bound to a container."""

from typing import Any, ClassVar

from ..api.container import ContainerAPI, CreateDomainRequest, Domain
from ..errors import ResponseError
from ..locality import expand_id, flatten_id
from ..waiter import retry_on_transient, status_classifier, wait_for
from .base import RegionalArgs

DEFAULT_CONTAINER_DOMAIN_TIMEOUT = 10 * 60
DEFAULT_CONTAINER_RETRY_INTERVAL = 5.0

DNS_RESOLVE_ERROR_PREFIX = "could not validate domain"

classify_domain = status_classifier(ready={"ready"}, error={"error"})


class ContainerDomainArgs(RegionalArgs):
    default_timeout: ClassVar[float] = DEFAULT_CONTAINER_DOMAIN_TIMEOUT
    replace_fields: ClassVar[tuple[str, ...]] = ("container_id", "hostname", "region")
    computed_fields: ClassVar[tuple[str, ...]] = ("url", "status")

    container_id: str
    hostname: str


def is_container_dns_resolve_error(err: BaseException) -> bool:
    """True while the CNAME of the domain is not resolvable yet."""
    return isinstance(err, ResponseError) and err.message.startswith(
        DNS_RESOLVE_ERROR_PREFIX
    )


def build_create_domain_request(args: ContainerDomainArgs) -> CreateDomainRequest:
    return CreateDomainRequest(
        hostname=args.hostname,
        container_id=expand_id(args.container_id),
    )


def retry_create_container_domain(
    api: ContainerAPI,
    region: str,
    req: CreateDomainRequest,
    timeout: float,
    interval: float | None = None,
) -> Domain:
    """Create a domain, retrying while DNS has not propagated yet.

    Attempts are spaced by DEFAULT_CONTAINER_RETRY_INTERVAL unless interval is given.
    """
    return retry_on_transient(
        lambda: api.create_domain(region, req),
        is_container_dns_resolve_error,
        timeout=timeout,
        interval=DEFAULT_CONTAINER_RETRY_INTERVAL if interval is None else interval,
        description=f"create domain {req.hostname}",
    )


def flatten_domain(domain: Domain, region: str, declared: ContainerDomainArgs) -> dict[str, Any]:
    outs = declared.to_props()
    outs.update(
        {
            "region": region,
            "hostname": domain.hostname,
            "container_id": flatten_id(declared.container_id, region, domain.container_id),
            "url": domain.url,
            "status": domain.status,
        }
    )
    return outs


def wait_for_container_domain(
    api: ContainerAPI,
    region: str,
    domain_id: str,
    timeout: float,
    interval: float | None = None,
) -> Domain:
    return wait_for(
        lambda: api.get_domain(region, domain_id),
        classify_domain,
        timeout=timeout,
        interval=interval,
        resource=f"container domain {region}/{domain_id}",
    )
