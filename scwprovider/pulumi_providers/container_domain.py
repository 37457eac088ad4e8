"""Pulumi dynamic provider for custom domains of serverless containers."""

from typing import Any

import pulumi

from ..api.container import ContainerAPI
from ..diagnostics import Diagnostics
from ..diff import ChangeSet
from ..errors import NotFoundError
from ..locality import new_id_string, parse_regional_id
from ..resources.domain import (
    ContainerDomainArgs,
    build_create_domain_request,
    flatten_domain,
    retry_create_container_domain,
    wait_for_container_domain,
)
from .base import ScalewayResource, ScalewayResourceProvider


class ContainerDomainProvider(ScalewayResourceProvider[ContainerDomainArgs]):
    """Bind a hostname to a container.

    The hostname must have a CNAME pointing to the container domain name.
    Creation is retried while the API cannot resolve it yet.
    """

    args_type = ContainerDomainArgs
    api_type = ContainerAPI
    resource_label = "container domain"

    def _create(
        self, api: ContainerAPI, args: ContainerDomainArgs, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        region = args.resolved_region()
        timeout = args.operation_timeout("create")

        domain = retry_create_container_domain(
            api, region, build_create_domain_request(args), timeout
        )
        domain = wait_for_container_domain(api, region, domain.id, timeout)
        if domain.status == "error":
            diagnostics.error(
                f"domain {args.hostname} is in error state", domain.error_message or ""
            )
        return new_id_string(region, domain.id), flatten_domain(domain, region, args)

    def _read(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerDomainArgs,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, domain_id = parse_regional_id(id_)
        try:
            domain = wait_for_container_domain(
                api, region, domain_id, args.operation_timeout("read")
            )
        except NotFoundError:
            return None
        return flatten_domain(domain, region, args)

    def _update(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerDomainArgs,
        changes: ChangeSet,
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        # Every input forces a replacement, only timeouts can change here.
        return self._read(api, id_, args, diagnostics)

    def _delete(
        self,
        api: ContainerAPI,
        id_: str,
        args: ContainerDomainArgs,
        diagnostics: Diagnostics,
    ) -> None:
        region, domain_id = parse_regional_id(id_)
        timeout = args.operation_timeout("delete")

        try:
            wait_for_container_domain(api, region, domain_id, timeout)
            api.delete_domain(region, domain_id)
        except NotFoundError:
            return


class ContainerDomain(ScalewayResource):
    """Pulumi resource for a container custom domain.

    Attributes:
        url: URL the container answers on
        status: Status reported by the API
    """

    provider_type = ContainerDomainProvider

    region: pulumi.Output[str]
    url: pulumi.Output[str]
    status: pulumi.Output[str]
