"""Upstream protocol and TLS origination (``backend-protocol``, ``proxy-ssl-*``)."""

from __future__ import annotations

from typing import Any

from ....core.notifications import Severity
from ....core.validation import FieldError, not_supported
from ....ir.models import IR, BackendProtocol, ServiceContext
from ....models.gateway_api import (
    BackendTLSPolicy,
    BackendTLSPolicySpec,
    BackendTLSPolicyValidation,
    LocalObjectReference,
    LocalPolicyTargetReference,
    ObjectMeta,
)
from ....models.kubernetes import Ingress, IngressServiceBackend, NamespacedName
from .. import annotations as a
from ..context import annotation_path
from .base import IngressNginxFeature

WELL_KNOWN_SYSTEM_CA = "System"


def policy_name(service_name: str) -> str:
    return f"{service_name}-backend-tls"


def secret_name(secret_ref: str) -> str:
    """``[namespace/]name`` reduced to the name."""
    return secret_ref.rsplit("/", 1)[-1]


class BackendProtocolFeature(IngressNginxFeature):
    """Emits one BackendTLSPolicy per TLS-speaking backend Service."""

    name = "backend_protocol"
    triggers = (a.BACKEND_PROTOCOL, a.PROXY_SSL_SECRET)

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        errors: list[FieldError] = []

        protocol = self._parse_protocol(ingress, errors)
        ssl_secret = self._annotation(ingress, a.PROXY_SSL_SECRET) or None
        ssl_verify_raw = self._annotation(ingress, a.PROXY_SSL_VERIFY)
        ssl_verify = (
            ssl_verify_raw.lower() in ("on", "true") if ssl_verify_raw else None
        )
        ssl_name = self._annotation(ingress, a.PROXY_SSL_NAME) or None

        self._record_service_settings(ingress, ir, protocol, ssl_secret, ssl_verify)

        if not protocol.is_tls and ssl_secret is None:
            return errors

        namespace = ingress.metadata.namespace
        for backend in self._distinct_backends(ingress):
            key = NamespacedName(namespace, policy_name(backend.name))
            if key in ir.backend_tls_policies:
                self._logger.debug(f"BackendTLSPolicy {key} already exists")
                continue
            ir.backend_tls_policies[key] = self._build_policy(
                key, backend.name, ssl_name, ssl_secret
            )
            context.notifier.emit(
                Severity.INFO,
                f"generated BackendTLSPolicy {key} for Service {backend.name} "
                f"(protocol {protocol.value})",
                ingress.key,
            )
        return errors

    def _parse_protocol(
        self, ingress: Ingress, errors: list[FieldError]
    ) -> BackendProtocol:
        raw = self._annotation(ingress, a.BACKEND_PROTOCOL)
        if not raw:
            return BackendProtocol.HTTP
        try:
            return BackendProtocol(raw.upper())
        except ValueError:
            errors.append(
                not_supported(
                    annotation_path(ingress, a.BACKEND_PROTOCOL),
                    raw,
                    [p.value for p in BackendProtocol],
                )
            )
            return BackendProtocol.HTTP

    def _record_service_settings(
        self,
        ingress: Ingress,
        ir: IR,
        protocol: BackendProtocol,
        ssl_secret: str | None,
        ssl_verify: bool | None,
    ) -> None:
        namespace = ingress.metadata.namespace
        for backend in self._distinct_backends(ingress):
            svc_key = NamespacedName(namespace, backend.name)
            ext = ir.services.setdefault(svc_key, ServiceContext()).ingress_nginx()
            ext.backend_protocol = protocol
            if ssl_secret is not None:
                ext.proxy_ssl_secret = ssl_secret
            if ssl_verify is not None:
                ext.proxy_ssl_verify = ssl_verify
            for attr, key in (
                ("proxy_ssl_name", a.PROXY_SSL_NAME),
                ("proxy_ssl_protocols", a.PROXY_SSL_PROTOCOLS),
                ("proxy_ssl_ciphers", a.PROXY_SSL_CIPHERS),
            ):
                value = self._annotation(ingress, key)
                if value:
                    setattr(ext, attr, value)

    @staticmethod
    def _distinct_backends(ingress: Ingress) -> list[IngressServiceBackend]:
        seen: set[tuple[str, str]] = set()
        distinct: list[IngressServiceBackend] = []
        for backend in ingress.backends():
            port = backend.port.name or str(backend.port.number or "")
            if (backend.name, port) in seen:
                continue
            seen.add((backend.name, port))
            distinct.append(backend)
        return distinct

    @staticmethod
    def _build_policy(
        key: NamespacedName,
        service_name: str,
        ssl_name: str | None,
        ssl_secret: str | None,
    ) -> BackendTLSPolicy:
        validation = BackendTLSPolicyValidation(hostname=ssl_name or service_name)
        if ssl_secret:
            validation.ca_certificate_refs = [
                LocalObjectReference(kind="ConfigMap", name=secret_name(ssl_secret))
            ]
        else:
            validation.well_known_ca_certificates = WELL_KNOWN_SYSTEM_CA

        return BackendTLSPolicy(
            metadata=ObjectMeta(name=key.name, namespace=key.namespace),
            spec=BackendTLSPolicySpec(
                target_refs=[
                    LocalPolicyTargetReference(kind="Service", name=service_name)
                ],
                validation=validation,
            ),
        )
