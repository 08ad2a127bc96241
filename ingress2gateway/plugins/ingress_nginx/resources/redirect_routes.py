"""Companion HTTPRoutes that redirect plain HTTP to HTTPS."""

from __future__ import annotations

import logging

from ....core.common.route_resolver import listener_name, name_from_host
from ....ir.models import HTTPRouteContext
from ....models.gateway_api import (
    HTTPRequestRedirectFilter,
    HTTPRoute,
    HTTPRouteFilter,
    HTTPRouteRule,
    HTTPRouteSpec,
    ObjectMeta,
    ParentReference,
)
from ....models.kubernetes import NamespacedName
from ..config import GatewayConfig
from .common import generated_annotations, generated_labels

logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODE = 301


def redirect_route_key(
    route_key: NamespacedName, hostname: str, hostnames: list[str]
) -> NamespacedName:
    if len(hostnames) <= 1:
        return NamespacedName(route_key.namespace, f"{route_key.name}-redirect")
    return NamespacedName(
        route_key.namespace, f"{route_key.name}-{name_from_host(hostname)}-redirect"
    )


class RedirectRouteBuilder:
    """
    For every hostname of a route flagged for SSL redirect, builds an
    HTTPRoute bound only to that host's plain-HTTP listener whose single rule
    answers with a permanent redirect to https.
    """

    def __init__(self, gateway_config: GatewayConfig):
        self._config = gateway_config
        self._logger = logger.getChild(self.__class__.__name__)

    def build(
        self, route_key: NamespacedName, route_ctx: HTTPRouteContext
    ) -> list[HTTPRoute]:
        hostnames = list(route_ctx.http_route.spec.hostnames)
        gateway = self._config.gateway_ref(route_key.namespace)
        routes: list[HTTPRoute] = []
        for hostname in hostnames:
            key = redirect_route_key(route_key, hostname, hostnames)
            routes.append(
                HTTPRoute(
                    metadata=ObjectMeta(
                        name=key.name,
                        namespace=key.namespace,
                        labels=generated_labels(),
                        annotations=generated_annotations(
                            "ssl-redirect",
                            f"HTTP to HTTPS redirect for {hostname}",
                        ),
                    ),
                    spec=HTTPRouteSpec(
                        parent_refs=[
                            ParentReference(
                                namespace=gateway.namespace,
                                name=gateway.name,
                                section_name=listener_name(hostname, "http"),
                            )
                        ],
                        hostnames=[hostname],
                        rules=[
                            HTTPRouteRule(
                                filters=[
                                    HTTPRouteFilter(
                                        type="RequestRedirect",
                                        request_redirect=HTTPRequestRedirectFilter(
                                            scheme="https",
                                            status_code=REDIRECT_STATUS_CODE,
                                        ),
                                    )
                                ]
                            )
                        ],
                    ),
                )
            )
        if not hostnames:
            self._logger.debug(f"Route {route_key} has no hostnames; no redirect")
        return routes
