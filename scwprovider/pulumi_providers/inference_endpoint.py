"""Pulumi dynamic provider for endpoints added to an inference deployment.

The resource owns at most one public and one private network endpoint of a
deployment. Their API IDs are kept in the outputs (``public_endpoint_id``,
``private_endpoint_id``) so endpoints created by the deployment itself are
never touched.
"""

import logging
from typing import Any

import pulumi
from pulumi.dynamic import ReadResult, UpdateResult

from ..api.inference import CreateEndpointRequest, InferenceAPI, UpdateEndpointRequest
from ..diagnostics import Diagnostics
from ..errors import NotFoundError
from ..locality import expand_id, new_id_string, parse_regional_id
from ..resources.inference import (
    InferenceEndpointArgs,
    expand_private_endpoint,
    expand_public_endpoint,
    flatten_inference_endpoints,
    validate_endpoint_args,
    wait_for_deployment,
)
from .base import ScalewayResource, ScalewayResourceProvider

logger = logging.getLogger(__name__)

ENDPOINT_KINDS = ("public", "private")


def stored_endpoint_ids(props: dict[str, Any] | None) -> dict[str, str | None]:
    """Endpoint IDs recorded in the outputs of a previous operation."""
    props = props or {}
    return {kind: props.get(f"{kind}_endpoint_id") for kind in ENDPOINT_KINDS}


def _endpoint_network(args: InferenceEndpointArgs) -> str | None:
    if args.private_endpoint is None:
        return None
    return expand_id(args.private_endpoint.private_network_id)


class InferenceEndpointProvider(ScalewayResourceProvider[InferenceEndpointArgs]):
    """Add public and/or private network endpoints to a deployment.

    ``disable_auth`` is updated in place. Moving the private endpoint to
    another network recreates it.
    """

    args_type = InferenceEndpointArgs
    api_type = InferenceAPI
    resource_label = "inference endpoint"

    def validate(self, args: InferenceEndpointArgs) -> None:
        validate_endpoint_args(args)

    def read(self, id_: str, props: dict[str, Any]) -> ReadResult:
        args = self.args_type.from_props(props)
        outs = self._run("read", self._read_endpoints, id_, args, stored_endpoint_ids(props))
        if outs is None:
            logger.info(f"{self.resource_label} {id_} not found, removing it from state")
            return ReadResult(id_="", outs={})
        return ReadResult(id_=id_, outs=outs)

    def update(self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]) -> UpdateResult:
        old_args = self.args_type.from_props(_olds)
        args = self.args_type.from_props(_news)
        outs = self._run(
            "update", self._reconcile, _id, old_args, args, stored_endpoint_ids(_olds)
        )
        return UpdateResult(outs=outs if outs is not None else args.to_props())

    def delete(self, _id: str, _props: dict[str, Any]) -> None:
        args = self.args_type.from_props(_props)
        self._run("delete", self._delete_endpoints, _id, args, stored_endpoint_ids(_props))
        logger.info(f"Deleted {self.resource_label} {_id}")

    def _create(
        self, api: InferenceAPI, args: InferenceEndpointArgs, diagnostics: Diagnostics
    ) -> tuple[str, dict[str, Any]]:
        region = args.resolved_region()
        deployment_id = expand_id(args.deployment_id)
        timeout = args.operation_timeout("create")

        wait_for_deployment(api, region, deployment_id, timeout)
        ids = self._create_endpoints(api, region, deployment_id, args, ENDPOINT_KINDS)
        deployment = wait_for_deployment(api, region, deployment_id, timeout)

        outs = flatten_inference_endpoints(
            deployment, region, args, ids.get("public"), ids.get("private")
        )
        return new_id_string(region, deployment_id), outs

    def _read_endpoints(
        self,
        api: InferenceAPI,
        id_: str,
        args: InferenceEndpointArgs,
        ids: dict[str, str | None],
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        region, deployment_id = parse_regional_id(id_)
        try:
            deployment = wait_for_deployment(
                api, region, deployment_id, args.operation_timeout("read")
            )
        except NotFoundError:
            return None
        return flatten_inference_endpoints(
            deployment, region, args, ids["public"], ids["private"]
        )

    def _reconcile(
        self,
        api: InferenceAPI,
        id_: str,
        old: InferenceEndpointArgs,
        new: InferenceEndpointArgs,
        ids: dict[str, str | None],
        diagnostics: Diagnostics,
    ) -> dict[str, Any] | None:
        """Bring the deployment endpoints from ``old`` to ``new``.

        Blocks that disappeared are deleted, new blocks are created and
        ``disable_auth`` changes are patched in place.
        """
        region, deployment_id = parse_regional_id(id_)
        timeout = new.operation_timeout("update")

        try:
            wait_for_deployment(api, region, deployment_id, timeout)
        except NotFoundError:
            return None

        ids = dict(ids)
        to_create = []
        for kind in ENDPOINT_KINDS:
            old_block = getattr(old, f"{kind}_endpoint")
            new_block = getattr(new, f"{kind}_endpoint")
            recreate = kind == "private" and _endpoint_network(old) != _endpoint_network(new)

            if ids[kind] and (new_block is None or recreate):
                self._delete_endpoint(api, region, ids[kind])
                ids[kind] = None
            if new_block is None:
                continue

            if ids[kind] is None:
                to_create.append(kind)
            elif old_block is None or old_block.disable_auth != new_block.disable_auth:
                api.update_endpoint(
                    region, ids[kind], UpdateEndpointRequest(disable_auth=new_block.disable_auth)
                )

        ids.update(self._create_endpoints(api, region, deployment_id, new, to_create))
        deployment = wait_for_deployment(api, region, deployment_id, timeout)
        return flatten_inference_endpoints(
            deployment, region, new, ids["public"], ids["private"]
        )

    def _delete_endpoints(
        self,
        api: InferenceAPI,
        id_: str,
        args: InferenceEndpointArgs,
        ids: dict[str, str | None],
        diagnostics: Diagnostics,
    ) -> None:
        region, deployment_id = parse_regional_id(id_)
        timeout = args.operation_timeout("delete")

        try:
            wait_for_deployment(api, region, deployment_id, timeout)
        except NotFoundError:
            return

        for kind in ENDPOINT_KINDS:
            if ids[kind]:
                self._delete_endpoint(api, region, ids[kind])

        try:
            wait_for_deployment(api, region, deployment_id, timeout)
        except NotFoundError:
            return

    @staticmethod
    def _create_endpoints(
        api: InferenceAPI,
        region: str,
        deployment_id: str,
        args: InferenceEndpointArgs,
        kinds,
    ) -> dict[str, str]:
        ids = {}
        for kind in kinds:
            if kind == "public" and args.public_endpoint is not None:
                spec = expand_public_endpoint(args.public_endpoint)
            elif kind == "private" and args.private_endpoint is not None:
                spec = expand_private_endpoint(args.private_endpoint)
            else:
                continue
            endpoint = api.create_endpoint(
                region, CreateEndpointRequest(deployment_id=deployment_id, endpoint=spec)
            )
            logger.debug(f"Created {kind} endpoint {endpoint.id} on deployment {deployment_id}")
            ids[kind] = endpoint.id
        return ids

    @staticmethod
    def _delete_endpoint(api: InferenceAPI, region: str, endpoint_id: str) -> None:
        try:
            api.delete_endpoint(region, endpoint_id)
        except NotFoundError:
            logger.debug(f"Endpoint {endpoint_id} already deleted")


class InferenceEndpoint(ScalewayResource):
    """Pulumi resource for endpoints of an inference deployment.

    Attributes:
        public_endpoint_url: URL of the public endpoint, if declared
        private_endpoint_url: URL of the private network endpoint, if declared
    """

    provider_type = InferenceEndpointProvider

    region: pulumi.Output[str]
    public_endpoint_id: pulumi.Output[str | None]
    public_endpoint_url: pulumi.Output[str | None]
    private_endpoint_id: pulumi.Output[str | None]
    private_endpoint_url: pulumi.Output[str | None]
