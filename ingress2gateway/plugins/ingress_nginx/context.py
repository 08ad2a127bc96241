"""
ingress-nginx Feature Context

Context object handed to every feature pass: the source objects, the service
ports lookup, the route groupings and the notification sink. Passes receive
everything they need from here instead of reaching into the provider.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...core.common.route_resolver import RuleGroup
from ...core.protocols import NotificationSink
from ...core.validation import FieldPath
from ...ir.models import IR, HTTPRouteContext
from ...models.kubernetes import Ingress, NamespacedName


def annotation_path(ingress: Ingress, key: str) -> FieldPath:
    """Path used to attribute errors to one annotation of one object."""
    meta = ingress.metadata
    base = FieldPath.of("ingress", meta.namespace, meta.name)
    return base.child("metadata", "annotations").key(key)


@dataclass
class FeatureContext:
    ingresses: list[Ingress]
    service_ports: dict[NamespacedName, dict[str, int]]
    rule_groups: dict[NamespacedName, RuleGroup]
    notifier: NotificationSink
    _routes_by_source: dict[NamespacedName, list[NamespacedName]] = field(
        init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._routes_by_source = {}
        for route_key, group in self.rule_groups.items():
            for source in group.sources:
                self._routes_by_source.setdefault(source.key, []).append(route_key)

    def route_keys_for(self, ingress: Ingress) -> list[NamespacedName]:
        """Keys of the routes this object's rules were folded into."""
        return list(self._routes_by_source.get(ingress.key, []))

    def routes_for(
        self, ingress: Ingress, ir: IR
    ) -> list[tuple[NamespacedName, HTTPRouteContext]]:
        """Existing IR routes this object contributes to; never creates one."""
        return [
            (key, ir.http_routes[key])
            for key in self.route_keys_for(ingress)
            if key in ir.http_routes
        ]
