"""
Provider-agnostic lowering of Ingress objects.

Ingress rules are grouped by ``(namespace, ingress class, host)``; each group
becomes one HTTPRoute named ``<first ingress>-<host slug>``. Each
``(namespace, ingress class)`` pair gets one Gateway with an HTTP listener
per host and an HTTPS listener for every host covered by a TLS block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...ir.models import IR, HTTPRouteContext, ServiceContext
from ...models.gateway_api import (
    Gateway,
    GatewayResources,
    GatewaySpec,
    GatewayTLSConfig,
    HTTPBackendRef,
    HTTPPathMatch,
    HTTPRoute,
    HTTPRouteMatch,
    HTTPRouteRule,
    HTTPRouteSpec,
    Listener,
    ObjectMeta,
    ParentReference,
    SecretObjectReference,
)
from ...models.kubernetes import (
    Ingress,
    IngressServiceBackend,
    NamespacedName,
)
from ..validation import FieldError, FieldPath, invalid

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_NAME = "default"

_PATH_TYPES = {
    "Exact": "Exact",
    "Prefix": "PathPrefix",
    "ImplementationSpecific": "PathPrefix",
}


def name_from_host(host: str) -> str:
    """Slug used in route and listener names; empty host means all hosts."""
    if not host:
        return "all-hosts"
    return host.replace("*", "wildcard").replace(".", "-").lower()


def route_name(ingress_name: str, host: str) -> str:
    return f"{ingress_name}-{name_from_host(host)}"


def listener_name(host: str, protocol: str) -> str:
    return f"{name_from_host(host)}-{protocol.lower()}"


@dataclass
class _RoutePath:
    ingress: Ingress
    path: str
    path_type: str
    backend: IngressServiceBackend
    field_path: FieldPath


@dataclass
class RuleGroup:
    """Rules of every ingress sharing a namespace, class and host."""

    namespace: str
    name: str
    host: str
    ingress_class: str
    paths: list[_RoutePath] = field(default_factory=list)
    sources: list[Ingress] = field(default_factory=list)
    tls_secrets: list[str] = field(default_factory=list)

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(self.namespace, route_name(self.name, self.host))

    def add_source(self, ingress: Ingress) -> None:
        if all(src.key != ingress.key for src in self.sources):
            self.sources.append(ingress)
        for tls in ingress.spec.tls:
            if self.host and self.host in tls.hosts and tls.secret_name:
                if tls.secret_name not in self.tls_secrets:
                    self.tls_secrets.append(tls.secret_name)


def get_rule_groups(ingresses: list[Ingress]) -> dict[NamespacedName, RuleGroup]:
    """Group ingress rules into routes, preserving first-seen order."""
    by_group_key: dict[tuple[str, str, str], RuleGroup] = {}

    def group_for(ingress: Ingress, host: str) -> RuleGroup:
        group_key = (ingress.metadata.namespace, ingress.ingress_class, host)
        group = by_group_key.get(group_key)
        if group is None:
            group = RuleGroup(
                namespace=ingress.metadata.namespace,
                name=ingress.metadata.name,
                host=host,
                ingress_class=ingress.ingress_class,
            )
            by_group_key[group_key] = group
        group.add_source(ingress)
        return group

    for ingress in ingresses:
        meta = ingress.metadata
        base = FieldPath.of("ingress", meta.namespace, meta.name)
        for i, rule in enumerate(ingress.spec.rules):
            group = group_for(ingress, rule.host)
            if rule.http is None:
                continue
            for j, http_path in enumerate(rule.http.paths):
                if http_path.backend.service is None:
                    continue
                group.paths.append(
                    _RoutePath(
                        ingress=ingress,
                        path=http_path.path or "/",
                        path_type=http_path.path_type,
                        backend=http_path.backend.service,
                        field_path=base.child(
                            "spec", f"rules[{i}]", "http", f"paths[{j}]", "backend"
                        ),
                    )
                )

        default_backend = ingress.spec.default_backend
        if default_backend is not None and default_backend.service is not None:
            group = group_for(ingress, "")
            group.paths.append(
                _RoutePath(
                    ingress=ingress,
                    path="/",
                    path_type="Prefix",
                    backend=default_backend.service,
                    field_path=base.child("spec", "defaultBackend"),
                )
            )

    return {group.key: group for group in by_group_key.values()}


def gateway_name_for_class(ingress_class: str) -> str:
    return ingress_class or DEFAULT_GATEWAY_NAME


def _resolve_port(
    route_path: _RoutePath,
    service_ports: dict[NamespacedName, dict[str, int]],
) -> tuple[int | None, FieldError | None]:
    port = route_path.backend.port
    if port.number is not None:
        return port.number, None
    if port.name is None:
        return None, None
    svc_key = NamespacedName(
        route_path.ingress.metadata.namespace, route_path.backend.name
    )
    number = service_ports.get(svc_key, {}).get(port.name)
    if number is None:
        return None, invalid(
            route_path.field_path.child("service", "port", "name"),
            port.name,
            f"named port not found on Service {svc_key}",
        )
    return number, None


def _build_route(
    group: RuleGroup,
    service_ports: dict[NamespacedName, dict[str, int]],
    errors: list[FieldError],
) -> HTTPRoute:
    rules: list[HTTPRouteRule] = []
    for route_path in group.paths:
        port, error = _resolve_port(route_path, service_ports)
        if error is not None:
            errors.append(error)
            continue
        rules.append(
            HTTPRouteRule(
                matches=[
                    HTTPRouteMatch(
                        path=HTTPPathMatch(
                            type=_PATH_TYPES.get(route_path.path_type, "PathPrefix"),
                            value=route_path.path,
                        )
                    )
                ],
                backend_refs=[HTTPBackendRef(name=route_path.backend.name, port=port)],
            )
        )

    return HTTPRoute(
        metadata=ObjectMeta(name=group.key.name, namespace=group.namespace),
        spec=HTTPRouteSpec(
            parent_refs=[
                ParentReference(name=gateway_name_for_class(group.ingress_class))
            ],
            hostnames=[group.host] if group.host else [],
            rules=rules,
        ),
    )


def _add_listeners(gateway: Gateway, group: RuleGroup) -> None:
    existing = {listener.name for listener in gateway.spec.listeners}
    hostname = group.host or None

    http_name = listener_name(group.host, "http")
    if http_name not in existing:
        gateway.spec.listeners.append(
            Listener(name=http_name, hostname=hostname, port=80, protocol="HTTP")
        )

    https_name = listener_name(group.host, "https")
    if group.tls_secrets and https_name not in existing:
        gateway.spec.listeners.append(
            Listener(
                name=https_name,
                hostname=hostname,
                port=443,
                protocol="HTTPS",
                tls=GatewayTLSConfig(
                    certificate_refs=[
                        SecretObjectReference(name=secret)
                        for secret in group.tls_secrets
                    ]
                ),
            )
        )


def ingresses_to_ir(
    ingresses: list[Ingress],
    service_ports: dict[NamespacedName, dict[str, int]],
) -> tuple[IR, list[FieldError]]:
    """Build the provisional, provider-neutral IR for a set of ingresses."""
    ir = IR()
    errors: list[FieldError] = []

    for key, group in get_rule_groups(ingresses).items():
        gw_key = NamespacedName(
            group.namespace, gateway_name_for_class(group.ingress_class)
        )
        gateway = ir.gateways.get(gw_key)
        if gateway is None:
            gateway = Gateway(
                metadata=ObjectMeta(name=gw_key.name, namespace=gw_key.namespace),
                spec=GatewaySpec(gateway_class_name=gw_key.name),
            )
            ir.gateways[gw_key] = gateway
        _add_listeners(gateway, group)

        ir.http_routes[key] = HTTPRouteContext(
            http_route=_build_route(group, service_ports, errors),
            sources=[src.key for src in group.sources],
        )

        for route_path in group.paths:
            svc_key = NamespacedName(group.namespace, route_path.backend.name)
            if svc_key not in ir.services:
                ir.services[svc_key] = ServiceContext(
                    ports=dict(service_ports.get(svc_key, {}))
                )

    logger.debug(
        f"Lowered {len(ingresses)} ingresses into {len(ir.http_routes)} routes "
        f"and {len(ir.gateways)} gateways"
    )
    return ir, errors


def ir_to_gateway_resources(ir: IR) -> GatewayResources:
    """Copy the generic payloads of the IR into a fresh output set."""
    return GatewayResources(
        gateways={k: gw.model_copy(deep=True) for k, gw in ir.gateways.items()},
        http_routes={
            k: ctx.http_route.model_copy(deep=True)
            for k, ctx in ir.http_routes.items()
        },
        backend_tls_policies={
            k: policy.model_copy(deep=True)
            for k, policy in ir.backend_tls_policies.items()
        },
        reference_grants={
            k: grant.model_copy(deep=True) for k, grant in ir.reference_grants.items()
        },
    )
