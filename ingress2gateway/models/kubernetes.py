"""
Kubernetes source objects read from manifests.

Only the subset of the ``networking.k8s.io/v1`` Ingress and ``v1`` Service
schemas that the conversion consumes is modelled. Models are frozen: the
conversion reads them and never writes back.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

INGRESS_CLASS_ANNOTATION = "kubernetes.io/ingress.class"


class NamespacedName(NamedTuple):
    """Identity of a namespaced object; used as the key of every output map."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class _K8sModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class ObjectMeta(_K8sModel):
    name: str
    namespace: str = "default"
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Ingress
# ---------------------------------------------------------------------------


class ServiceBackendPort(_K8sModel):
    name: str | None = None
    number: int | None = None


class IngressServiceBackend(_K8sModel):
    name: str
    port: ServiceBackendPort = Field(default_factory=ServiceBackendPort)


class IngressBackend(_K8sModel):
    service: IngressServiceBackend | None = None
    resource: dict[str, Any] | None = None


class HTTPIngressPath(_K8sModel):
    path: str = "/"
    path_type: str = Field("Prefix", alias="pathType")
    backend: IngressBackend


class HTTPIngressRuleValue(_K8sModel):
    paths: list[HTTPIngressPath] = Field(default_factory=list)


class IngressRule(_K8sModel):
    host: str = ""
    http: HTTPIngressRuleValue | None = None


class IngressTLS(_K8sModel):
    hosts: list[str] = Field(default_factory=list)
    secret_name: str | None = Field(None, alias="secretName")


class IngressSpec(_K8sModel):
    ingress_class_name: str | None = Field(None, alias="ingressClassName")
    default_backend: IngressBackend | None = Field(None, alias="defaultBackend")
    rules: list[IngressRule] = Field(default_factory=list)
    tls: list[IngressTLS] = Field(default_factory=list)


class Ingress(_K8sModel):
    api_version: str = Field("networking.k8s.io/v1", alias="apiVersion")
    kind: str = "Ingress"
    metadata: ObjectMeta
    spec: IngressSpec = Field(default_factory=IngressSpec)

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(self.metadata.namespace, self.metadata.name)

    @property
    def annotations(self) -> dict[str, str]:
        return self.metadata.annotations

    @property
    def ingress_class(self) -> str:
        """``spec.ingressClassName``, else the legacy class annotation."""
        if self.spec.ingress_class_name:
            return self.spec.ingress_class_name
        return self.metadata.annotations.get(INGRESS_CLASS_ANNOTATION, "")

    def backends(self) -> list[IngressServiceBackend]:
        """Default backend first, then rule backends in declaration order."""
        found: list[IngressServiceBackend] = []
        if self.spec.default_backend and self.spec.default_backend.service:
            found.append(self.spec.default_backend.service)
        for rule in self.spec.rules:
            if rule.http is None:
                continue
            for path in rule.http.paths:
                if path.backend.service:
                    found.append(path.backend.service)
        return found


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ServicePort(_K8sModel):
    name: str | None = None
    port: int
    protocol: str = "TCP"


class ServiceSpec(_K8sModel):
    ports: list[ServicePort] = Field(default_factory=list)


class Service(_K8sModel):
    api_version: str = Field("v1", alias="apiVersion")
    kind: str = "Service"
    metadata: ObjectMeta
    spec: ServiceSpec = Field(default_factory=ServiceSpec)

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(self.metadata.namespace, self.metadata.name)

    def port_lookup(self) -> dict[str, int]:
        """Map port names and stringified numbers to port numbers."""
        lookup: dict[str, int] = {}
        for port in self.spec.ports:
            lookup[str(port.port)] = port.port
            if port.name:
                lookup[port.name] = port.port
        return lookup


__all__ = [
    "INGRESS_CLASS_ANNOTATION",
    "NamespacedName",
    "ObjectMeta",
    "ServiceBackendPort",
    "IngressServiceBackend",
    "IngressBackend",
    "HTTPIngressPath",
    "HTTPIngressRuleValue",
    "IngressRule",
    "IngressTLS",
    "IngressSpec",
    "Ingress",
    "ServicePort",
    "ServiceSpec",
    "Service",
]
