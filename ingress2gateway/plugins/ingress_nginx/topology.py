"""
Gateway topology rewriting.

Generic lowering produces one Gateway per (namespace, ingress class). The
transform reshapes that into the operator's chosen topology:

* centralized: every generated Gateway is dropped and routes attach to the
  single pre-provisioned shared Gateway;
* per-namespace: each namespace's routes attach to a ``<ns>-gateway``
  Gateway whose listeners are the union of the Gateways those routes used.
"""

from __future__ import annotations

import logging

from ...models.gateway_api import (
    Gateway,
    GatewayResources,
    GatewaySpec,
    HTTPRoute,
    Listener,
    ObjectMeta,
    ParentReference,
)
from ...models.kubernetes import NamespacedName
from .config import GatewayConfig
from .resources.common import generated_labels

logger = logging.getLogger(__name__)


def parent_ref_key(route: HTTPRoute, ref: ParentReference) -> NamespacedName:
    """Gateway a parentRef points at; namespace defaults to the route's."""
    return NamespacedName(ref.namespace or route.metadata.namespace, ref.name)


def _is_gateway_ref(ref: ParentReference) -> bool:
    return (ref.kind or "Gateway") == "Gateway"


class TopologyTransform:
    def __init__(self, gateway_config: GatewayConfig):
        self._config = gateway_config
        self._logger = logger.getChild(self.__class__.__name__)

    def apply(self, resources: GatewayResources) -> None:
        """Rewrite ``resources`` in place."""
        if self._config.is_centralized:
            self._centralize(resources)
        else:
            self._split_per_namespace(resources)

    def _rewrite_refs(
        self,
        route: HTTPRoute,
        old_keys: set[NamespacedName],
        target: NamespacedName,
    ) -> int:
        rewritten = 0
        for ref in route.spec.parent_refs:
            if not _is_gateway_ref(ref):
                continue
            if parent_ref_key(route, ref) in old_keys:
                ref.namespace = target.namespace
                ref.name = target.name
                rewritten += 1
        return rewritten

    def _centralize(self, resources: GatewayResources) -> None:
        target = self._config.gateway_ref("")
        old_keys = set(resources.gateways)
        rewritten = 0
        for route in resources.http_routes.values():
            rewritten += self._rewrite_refs(route, old_keys, target)
        resources.gateways.clear()
        self._logger.info(
            f"Centralized topology: {rewritten} parentRefs now target {target}; "
            f"removed {len(old_keys)} generated Gateways"
        )

    def _split_per_namespace(self, resources: GatewayResources) -> None:
        old_gateways = dict(resources.gateways)
        routes_by_namespace: dict[str, list[HTTPRoute]] = {}
        for key, route in resources.http_routes.items():
            routes_by_namespace.setdefault(key.namespace, []).append(route)

        tenant_gateways: dict[NamespacedName, Gateway] = {}
        for namespace, routes in routes_by_namespace.items():
            used = [
                parent_ref_key(route, ref)
                for route in routes
                for ref in route.spec.parent_refs
                if _is_gateway_ref(ref) and parent_ref_key(route, ref) in old_gateways
            ]
            if not used:
                continue

            target = self._config.gateway_ref(namespace)
            listeners = self._merge_listeners(
                [old_gateways[key] for key in dict.fromkeys(used)]
            )
            tenant_gateways[target] = Gateway(
                metadata=ObjectMeta(
                    name=target.name,
                    namespace=target.namespace,
                    labels=generated_labels(),
                ),
                spec=GatewaySpec(
                    gateway_class_name=self._config.gateway_class_name,
                    listeners=listeners,
                ),
            )

            old_keys = set(used)
            for route in routes:
                self._rewrite_refs(route, old_keys, target)

        resources.gateways.clear()
        resources.gateways.update(tenant_gateways)
        self._logger.info(
            f"Per-namespace topology: {len(tenant_gateways)} Gateways replace "
            f"{len(old_gateways)} generated Gateways"
        )

    def _merge_listeners(self, gateways: list[Gateway]) -> list[Listener]:
        """
        Union of listeners by name.

        Same-named TLS listeners pool their certificate refs, so a host served
        over TLS by several ingress classes keeps every secret.
        """
        merged: dict[str, Listener] = {}
        for listener in (ls for gw in gateways for ls in gw.spec.listeners):
            current = merged.get(listener.name)
            if current is None:
                merged[listener.name] = listener.model_copy(deep=True)
                continue
            if listener.tls is None:
                continue
            if current.tls is None:
                current.tls = listener.tls.model_copy(deep=True)
                continue
            for ref in listener.tls.certificate_refs:
                if ref not in current.tls.certificate_refs:
                    current.tls.certificate_refs.append(ref.model_copy())
                    self._logger.info(
                        f"Listener {listener.name}: added certificate ref {ref.name}"
                    )
        return list(merged.values())
