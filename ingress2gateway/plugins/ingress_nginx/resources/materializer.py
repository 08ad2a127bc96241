"""Turns ingress-nginx route and service extensions into target objects."""

from __future__ import annotations

import logging
from typing import TypeVar

from ....core.notifications import Severity
from ....core.protocols import NotificationSink
from ....ir.models import IR
from ....models.gateway_api import GatewayResources
from ....models.kubernetes import NamespacedName
from ..config import GatewayConfig
from .envoy_filters import EnvoyFilterBuilder
from .redirect_routes import RedirectRouteBuilder
from .reference_grants import build_reference_grant, grant_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResourceMaterializer:
    """
    Adds provider-specific objects to an output set already holding the
    generic Gateways and HTTPRoutes.

    Every object is inserted under its (namespace, name) key; a key that is
    already present is left untouched, so running twice adds nothing.
    """

    def __init__(self, gateway_config: GatewayConfig, notifier: NotificationSink):
        self._config = gateway_config
        self._notifier = notifier
        self._filters = EnvoyFilterBuilder(gateway_config)
        self._redirects = RedirectRouteBuilder(gateway_config)
        self._logger = logger.getChild(self.__class__.__name__)

    def materialize(self, ir: IR, resources: GatewayResources) -> None:
        self._logger.info("Materializing provider-specific resources.")
        self._add_redirect_routes(ir, resources)
        self._add_envoy_filters(ir, resources)
        self._add_reference_grants(resources)
        self._emit_centralized_advisories(ir)

    def _insert(
        self, collection: dict[NamespacedName, T], key: NamespacedName, obj: T
    ) -> bool:
        if key in collection:
            self._logger.debug(f"{type(obj).__name__} {key} already exists; skipping")
            return False
        collection[key] = obj
        return True

    def _add_redirect_routes(self, ir: IR, resources: GatewayResources) -> None:
        for route_key, route_ctx in ir.http_routes.items():
            ext = route_ctx.provider_specific.ingress_nginx
            if ext is None or not ext.ssl_redirect:
                continue
            for route in self._redirects.build(route_key, route_ctx):
                if self._insert(resources.http_routes, route.key, route):
                    self._notifier.emit(
                        Severity.INFO,
                        f"Generated redirect HTTPRoute {route.key} for "
                        f"{route.spec.hostnames[0]}",
                        route_key,
                    )

    def _add_envoy_filters(self, ir: IR, resources: GatewayResources) -> None:
        for route_key, route_ctx in ir.http_routes.items():
            ext = route_ctx.provider_specific.ingress_nginx
            if ext is None:
                continue
            for envoy_filter in self._filters.build(route_key, ext):
                self._insert(
                    resources.gateway_extensions, envoy_filter.key, envoy_filter
                )

    def _add_reference_grants(self, resources: GatewayResources) -> None:
        namespaces = sorted({key.namespace for key in resources.http_routes})
        for namespace in namespaces:
            gateway = self._config.gateway_ref(namespace)
            if gateway.namespace == namespace:
                continue
            key = grant_key(namespace, gateway)
            if self._insert(
                resources.reference_grants,
                key,
                build_reference_grant(namespace, gateway),
            ):
                self._logger.debug(f"Generated ReferenceGrant {key}")

    def _emit_centralized_advisories(self, ir: IR) -> None:
        if not self._config.is_centralized:
            return
        gateway = self._config.gateway_ref("")
        for route_key, route_ctx in ir.http_routes.items():
            ext = route_ctx.provider_specific.ingress_nginx
            if ext is None:
                continue
            if ext.external_auth is not None:
                self._notifier.emit(
                    Severity.WARNING,
                    f"HTTPRoute {route_key} uses external auth; the ext_authz "
                    f"filter is installed on the shared Gateway {gateway} and "
                    "applies to every route attached to it",
                    route_key,
                )
            if ext.client_cert_auth is not None:
                self._notifier.emit(
                    Severity.WARNING,
                    f"HTTPRoute {route_key} requires client certificates; mutual "
                    f"TLS is configured per listener on the shared Gateway {gateway} "
                    "and affects every tenant using that listener",
                    route_key,
                )
