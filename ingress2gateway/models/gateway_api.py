"""
Gateway API target objects.

Typed models for the resources the conversion emits (``Gateway``,
``HTTPRoute``, ``BackendTLSPolicy``, ``ReferenceGrant``) and an opaque
wrapper for extension objects such as Istio ``EnvoyFilter`` documents.
Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .kubernetes import NamespacedName

GATEWAY_GROUP = "gateway.networking.k8s.io"
GATEWAY_V1 = f"{GATEWAY_GROUP}/v1"
GATEWAY_V1BETA1 = f"{GATEWAY_GROUP}/v1beta1"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class _TopLevelObject(_WireModel):
    """Shared behaviour of every emitted top-level object."""

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(self.metadata.namespace, self.metadata.name)

    def to_manifest(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ObjectMeta(_WireModel):
    name: str
    namespace: str
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class SecretObjectReference(_WireModel):
    group: str | None = None
    kind: str | None = None
    name: str
    namespace: str | None = None


class GatewayTLSConfig(_WireModel):
    mode: str = "Terminate"
    certificate_refs: list[SecretObjectReference] = Field(
        default_factory=list, alias="certificateRefs"
    )


class Listener(_WireModel):
    name: str
    hostname: str | None = None
    port: int
    protocol: str
    tls: GatewayTLSConfig | None = None


class GatewaySpec(_WireModel):
    gateway_class_name: str = Field(..., alias="gatewayClassName")
    listeners: list[Listener] = Field(default_factory=list)


class Gateway(_TopLevelObject):
    api_version: str = Field(GATEWAY_V1, alias="apiVersion")
    kind: str = "Gateway"
    metadata: ObjectMeta
    spec: GatewaySpec


# ---------------------------------------------------------------------------
# HTTPRoute
# ---------------------------------------------------------------------------


class ParentReference(_WireModel):
    group: str | None = None
    kind: str | None = None
    namespace: str | None = None
    name: str
    section_name: str | None = Field(None, alias="sectionName")


class HTTPPathMatch(_WireModel):
    type: str = "PathPrefix"
    value: str = "/"


class HTTPRouteMatch(_WireModel):
    path: HTTPPathMatch | None = None


class HTTPBackendRef(_WireModel):
    name: str
    namespace: str | None = None
    port: int | None = None


class HTTPRequestRedirectFilter(_WireModel):
    scheme: str | None = None
    hostname: str | None = None
    port: int | None = None
    status_code: int | None = Field(None, alias="statusCode")


class HTTPRouteFilter(_WireModel):
    type: str
    request_redirect: HTTPRequestRedirectFilter | None = Field(
        None, alias="requestRedirect"
    )


class HTTPRouteTimeouts(_WireModel):
    request: str | None = None
    backend_request: str | None = Field(None, alias="backendRequest")


class HTTPRouteRule(_WireModel):
    matches: list[HTTPRouteMatch] | None = None
    filters: list[HTTPRouteFilter] | None = None
    backend_refs: list[HTTPBackendRef] | None = Field(None, alias="backendRefs")
    timeouts: HTTPRouteTimeouts | None = None


class HTTPRouteSpec(_WireModel):
    parent_refs: list[ParentReference] = Field(
        default_factory=list, alias="parentRefs"
    )
    hostnames: list[str] = Field(default_factory=list)
    rules: list[HTTPRouteRule] = Field(default_factory=list)


class HTTPRoute(_TopLevelObject):
    api_version: str = Field(GATEWAY_V1, alias="apiVersion")
    kind: str = "HTTPRoute"
    metadata: ObjectMeta
    spec: HTTPRouteSpec = Field(default_factory=HTTPRouteSpec)


# ---------------------------------------------------------------------------
# BackendTLSPolicy
# ---------------------------------------------------------------------------


class LocalPolicyTargetReference(_WireModel):
    group: str = ""
    kind: str
    name: str


class LocalObjectReference(_WireModel):
    group: str = ""
    kind: str
    name: str


class BackendTLSPolicyValidation(_WireModel):
    hostname: str
    ca_certificate_refs: list[LocalObjectReference] | None = Field(
        None, alias="caCertificateRefs"
    )
    well_known_ca_certificates: str | None = Field(
        None, alias="wellKnownCACertificates"
    )


class BackendTLSPolicySpec(_WireModel):
    target_refs: list[LocalPolicyTargetReference] = Field(..., alias="targetRefs")
    validation: BackendTLSPolicyValidation


class BackendTLSPolicy(_TopLevelObject):
    api_version: str = Field(GATEWAY_V1, alias="apiVersion")
    kind: str = "BackendTLSPolicy"
    metadata: ObjectMeta
    spec: BackendTLSPolicySpec


# ---------------------------------------------------------------------------
# ReferenceGrant
# ---------------------------------------------------------------------------


class ReferenceGrantFrom(_WireModel):
    group: str
    kind: str
    namespace: str


class ReferenceGrantTo(_WireModel):
    group: str
    kind: str
    name: str | None = None


class ReferenceGrantSpec(_WireModel):
    from_: list[ReferenceGrantFrom] = Field(..., alias="from")
    to: list[ReferenceGrantTo]


class ReferenceGrant(_TopLevelObject):
    api_version: str = Field(GATEWAY_V1BETA1, alias="apiVersion")
    kind: str = "ReferenceGrant"
    metadata: ObjectMeta
    spec: ReferenceGrantSpec


# ---------------------------------------------------------------------------
# Extensions
# ---------------------------------------------------------------------------


class UnstructuredObject(BaseModel):
    """An extension object kept as a plain nested mapping."""

    content: dict[str, Any]

    @property
    def kind(self) -> str:
        return self.content.get("kind", "")

    @property
    def key(self) -> NamespacedName:
        metadata = self.content.get("metadata", {})
        return NamespacedName(metadata.get("namespace", ""), metadata.get("name", ""))

    def to_manifest(self) -> dict[str, Any]:
        return copy.deepcopy(self.content)


class GatewayResources(BaseModel):
    """Everything one conversion run emits, keyed by namespace and name."""

    gateways: dict[NamespacedName, Gateway] = Field(default_factory=dict)
    http_routes: dict[NamespacedName, HTTPRoute] = Field(default_factory=dict)
    backend_tls_policies: dict[NamespacedName, BackendTLSPolicy] = Field(
        default_factory=dict
    )
    reference_grants: dict[NamespacedName, ReferenceGrant] = Field(
        default_factory=dict
    )
    gateway_extensions: dict[NamespacedName, UnstructuredObject] = Field(
        default_factory=dict
    )

    def all_objects(self) -> list[_TopLevelObject | UnstructuredObject]:
        """Every object, grouped by kind in emission order and sorted by key."""
        objects: list[_TopLevelObject | UnstructuredObject] = []
        for group in (
            self.gateways,
            self.http_routes,
            self.backend_tls_policies,
            self.reference_grants,
            self.gateway_extensions,
        ):
            objects.extend(group[key] for key in sorted(group))
        return objects


__all__ = [
    "GATEWAY_GROUP",
    "GATEWAY_V1",
    "GATEWAY_V1BETA1",
    "ObjectMeta",
    "SecretObjectReference",
    "GatewayTLSConfig",
    "Listener",
    "GatewaySpec",
    "Gateway",
    "ParentReference",
    "HTTPPathMatch",
    "HTTPRouteMatch",
    "HTTPBackendRef",
    "HTTPRequestRedirectFilter",
    "HTTPRouteFilter",
    "HTTPRouteTimeouts",
    "HTTPRouteRule",
    "HTTPRouteSpec",
    "HTTPRoute",
    "LocalPolicyTargetReference",
    "LocalObjectReference",
    "BackendTLSPolicyValidation",
    "BackendTLSPolicySpec",
    "BackendTLSPolicy",
    "ReferenceGrantFrom",
    "ReferenceGrantTo",
    "ReferenceGrantSpec",
    "ReferenceGrant",
    "UnstructuredObject",
    "GatewayResources",
]
