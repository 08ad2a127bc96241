"""Shared builders for ingress-nginx provider tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from ingress2gateway.core.common.route_resolver import get_rule_groups, ingresses_to_ir
from ingress2gateway.core.notifications import NotificationCollector
from ingress2gateway.ir.models import IR
from ingress2gateway.models.kubernetes import Ingress
from ingress2gateway.plugins.ingress_nginx.context import FeatureContext

PREFIX = "nginx.ingress.kubernetes.io/"


def ingress_manifest(
    name: str = "web",
    namespace: str = "default",
    annotations: dict[str, str] | None = None,
    hosts: list[str] | None = None,
    service: str = "web-svc",
    port: int | str = 80,
    ingress_class: str = "nginx",
    tls_hosts: list[str] | None = None,
    default_backend: str | None = None,
) -> dict[str, Any]:
    """Plain-dict Ingress as it would appear in a manifest."""
    port_ref = {"number": port} if isinstance(port, int) else {"name": port}
    spec: dict[str, Any] = {
        "ingressClassName": ingress_class,
        "rules": [
            {
                "host": host,
                "http": {
                    "paths": [
                        {
                            "path": "/",
                            "pathType": "Prefix",
                            "backend": {"service": {"name": service, "port": port_ref}},
                        }
                    ]
                },
            }
            for host in (hosts if hosts is not None else ["example.com"])
        ],
    }
    if tls_hosts:
        spec["tls"] = [{"hosts": tls_hosts, "secretName": f"{name}-tls"}]
    if default_backend:
        spec["defaultBackend"] = {
            "service": {"name": default_backend, "port": {"number": 80}}
        }
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "annotations": {
                (k if "/" in k else PREFIX + k): v
                for k, v in (annotations or {}).items()
            },
        },
        "spec": spec,
    }


@pytest.fixture
def manifest() -> Callable[..., dict[str, Any]]:
    """Factory for plain-dict Ingress manifests."""
    return ingress_manifest


@pytest.fixture
def make_ingress() -> Callable[..., Ingress]:
    """Factory for Ingress objects; short annotation names get the nginx prefix."""

    def _make(**kwargs: Any) -> Ingress:
        return Ingress.model_validate(ingress_manifest(**kwargs))

    return _make


@pytest.fixture
def notifier() -> NotificationCollector:
    return NotificationCollector()


@pytest.fixture
def lower(
    notifier: NotificationCollector,
) -> Callable[..., tuple[FeatureContext, IR]]:
    """Lower ingresses into a provisional IR and the matching feature context."""

    def _lower(
        *ingresses: Ingress, service_ports: dict | None = None
    ) -> tuple[FeatureContext, IR]:
        items = list(ingresses)
        ports = service_ports or {}
        ir, _ = ingresses_to_ir(items, ports)
        context = FeatureContext(
            ingresses=items,
            service_ports=ports,
            rule_groups=get_rule_groups(items),
            notifier=notifier,
        )
        return context, ir

    return _lower
