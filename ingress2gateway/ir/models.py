"""
models.py – Intermediate Representation (IR)
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Provider-neutral working state between ingestion and emission. Generic route
and gateway payloads are Gateway API models; provider-specific extensions hang
off each route/service context in a per-provider sub-record, where every field
is explicitly optional and ``None`` means "annotation absent".
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.gateway_api import (
    BackendTLSPolicy,
    Gateway,
    HTTPRoute,
    ReferenceGrant,
)
from ..models.kubernetes import NamespacedName

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ClientCertVerifyMode(str, Enum):
    """Client certificate verification modes, valued as nginx spells them."""

    REQUIRED = "on"
    DISABLED = "off"
    OPTIONAL = "optional"
    OPTIONAL_NO_CA = "optional_no_ca"


class BackendProtocol(str, Enum):
    HTTP = "HTTP"
    HTTPS = "HTTPS"
    GRPC = "GRPC"
    GRPCS = "GRPCS"
    AUTO_HTTP = "AUTO_HTTP"
    FCGI = "FCGI"

    @property
    def is_tls(self) -> bool:
        return self in (BackendProtocol.HTTPS, BackendProtocol.GRPCS)


# ---------------------------------------------------------------------------
# Per-concern configuration records
# ---------------------------------------------------------------------------


class BodySize(BaseModel):
    """Request body limit as written and as parsed; ``bytes == 0`` is unlimited."""

    raw: str
    bytes: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def unlimited(self) -> bool:
        return self.bytes == 0


class ClientCertAuthConfig(BaseModel):
    """Mutual TLS requirements for downstream clients."""

    secret: str = Field(..., description="Secret holding the trusted CA bundle.")
    verify_client: ClientCertVerifyMode = ClientCertVerifyMode.REQUIRED
    verify_depth: int = Field(1, ge=0)
    error_page: str | None = None
    pass_certificate_to_upstream: bool = False

    model_config = ConfigDict(extra="forbid")

    @field_validator("secret")
    @classmethod
    def _secret_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("ClientCertAuthConfig.secret must not be empty")
        return v


class ExternalAuthConfig(BaseModel):
    """Delegation of request authorization to an external HTTP service."""

    url: str = Field(..., description="Authorization endpoint.")
    method: str = "GET"
    signin_url: str | None = None
    response_headers: list[str] = Field(
        default_factory=list,
        description="Headers copied from the auth response to the upstream request.",
    )
    request_redirect: str | None = None
    cache_key: str | None = None
    cache_duration: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("url")
    @classmethod
    def _url_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("ExternalAuthConfig.url must not be empty")
        return v

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper() if v else "GET"


# ---------------------------------------------------------------------------
# Provider sub-records
# ---------------------------------------------------------------------------


class IngressNginxRouteIR(BaseModel):
    """ingress-nginx extensions attached to one HTTPRoute."""

    ssl_redirect: bool | None = None
    proxy_body_size: BodySize | None = None
    proxy_buffering: bool | None = None
    proxy_request_buffering: bool | None = None
    rate_limit_rps: int | None = None
    rate_limit_burst: int | None = None
    rate_limit_connections: int | None = None
    client_cert_auth: ClientCertAuthConfig | None = None
    external_auth: ExternalAuthConfig | None = None

    model_config = ConfigDict(extra="forbid")

    @property
    def has_rate_limit(self) -> bool:
        return bool(self.rate_limit_rps and self.rate_limit_rps > 0)

    @property
    def buffering_disabled(self) -> bool:
        return self.proxy_buffering is False


class IngressNginxServiceIR(BaseModel):
    """ingress-nginx upstream settings attached to one backend Service."""

    backend_protocol: BackendProtocol | None = None
    proxy_ssl_secret: str | None = None
    proxy_ssl_verify: bool | None = None
    proxy_ssl_name: str | None = None
    proxy_ssl_protocols: str | None = None
    proxy_ssl_ciphers: str | None = None
    load_balance_algorithm: str | None = None

    model_config = ConfigDict(extra="forbid")


class ProviderSpecificRouteIR(BaseModel):
    ingress_nginx: IngressNginxRouteIR | None = None


class ProviderSpecificServiceIR(BaseModel):
    ingress_nginx: IngressNginxServiceIR | None = None


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------


class HTTPRouteContext(BaseModel):
    """A generic HTTPRoute plus everything providers learned about it."""

    http_route: HTTPRoute
    sources: list[NamespacedName] = Field(
        default_factory=list,
        description="Ingresses whose rules were folded into this route.",
    )
    provider_specific: ProviderSpecificRouteIR = Field(
        default_factory=ProviderSpecificRouteIR
    )

    def ingress_nginx(self) -> IngressNginxRouteIR:
        """Return the ingress-nginx sub-record, allocating it on first use."""
        if self.provider_specific.ingress_nginx is None:
            self.provider_specific.ingress_nginx = IngressNginxRouteIR()
        return self.provider_specific.ingress_nginx


class ServiceContext(BaseModel):
    ports: dict[str, int] = Field(default_factory=dict)
    provider_specific: ProviderSpecificServiceIR = Field(
        default_factory=ProviderSpecificServiceIR
    )

    def ingress_nginx(self) -> IngressNginxServiceIR:
        if self.provider_specific.ingress_nginx is None:
            self.provider_specific.ingress_nginx = IngressNginxServiceIR()
        return self.provider_specific.ingress_nginx


class IR(BaseModel):
    """Mutable working state of one conversion run."""

    gateways: dict[NamespacedName, Gateway] = Field(default_factory=dict)
    http_routes: dict[NamespacedName, HTTPRouteContext] = Field(default_factory=dict)
    services: dict[NamespacedName, ServiceContext] = Field(default_factory=dict)
    backend_tls_policies: dict[NamespacedName, BackendTLSPolicy] = Field(
        default_factory=dict
    )
    reference_grants: dict[NamespacedName, ReferenceGrant] = Field(
        default_factory=dict
    )


__all__ = [
    "ClientCertVerifyMode",
    "BackendProtocol",
    "BodySize",
    "ClientCertAuthConfig",
    "ExternalAuthConfig",
    "IngressNginxRouteIR",
    "IngressNginxServiceIR",
    "ProviderSpecificRouteIR",
    "ProviderSpecificServiceIR",
    "HTTPRouteContext",
    "ServiceContext",
    "IR",
]
