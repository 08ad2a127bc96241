"""
EnvoyFilter generation for route extensions Gateway API cannot express.

One filter per concern per route: local rate limiting, request body limits,
disabled proxy buffering and external authorization. Filters target the
Gateway the route is served by and live in the namespace the topology mode
dictates.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from ....ir.models import ExternalAuthConfig, IngressNginxRouteIR
from ....models.gateway_api import GATEWAY_GROUP, UnstructuredObject
from ....models.kubernetes import NamespacedName
from ..config import GatewayConfig
from .common import generated_annotations, generated_labels

logger = logging.getLogger(__name__)

ENVOY_FILTER_API_VERSION = "networking.istio.io/v1alpha3"

DEFAULT_BURST_MULTIPLIER = 5
UNLIMITED_BODY_SIZE_BYTES = 1024**3
CIRCUIT_BREAKER_LIMIT = 100000
EXT_AUTHZ_TIMEOUT = "5s"
DEFAULT_AUTH_UPSTREAM_HEADERS = (
    "authorization",
    "x-forwarded-user",
    "x-forwarded-email",
)

_HCM = "envoy.filters.network.http_connection_manager"
_ROUTER = "envoy.filters.http.router"


def _http_filter_match() -> dict[str, Any]:
    return {
        "context": "GATEWAY",
        "listener": {
            "filterChain": {"filter": {"name": _HCM, "subFilter": {"name": _ROUTER}}}
        },
    }


def _insert_http_filter(name: str, type_url: str, config: dict[str, Any]) -> dict:
    return {
        "applyTo": "HTTP_FILTER",
        "match": _http_filter_match(),
        "patch": {
            "operation": "INSERT_BEFORE",
            "value": {"name": name, "typed_config": {"@type": type_url, **config}},
        },
    }


def rate_limit_patches(rps: int, burst: int | None) -> list[dict[str, Any]]:
    percent = {"default_value": {"numerator": 100, "denominator": "HUNDRED"}}
    return [
        _insert_http_filter(
            "envoy.filters.http.local_ratelimit",
            "type.googleapis.com/envoy.extensions.filters.http.local_ratelimit.v3"
            ".LocalRateLimit",
            {
                "stat_prefix": "http_local_rate_limiter",
                "token_bucket": {
                    "max_tokens": burst or rps * DEFAULT_BURST_MULTIPLIER,
                    "tokens_per_fill": rps,
                    "fill_interval": "1s",
                },
                "filter_enabled": {
                    "runtime_key": "local_rate_limit_enabled",
                    **percent,
                },
                "filter_enforced": {
                    "runtime_key": "local_rate_limit_enforced",
                    **percent,
                },
                "response_headers_to_add": [
                    {
                        "append_action": "OVERWRITE_IF_EXISTS_OR_ADD",
                        "header": {"key": "x-local-rate-limit", "value": "true"},
                    }
                ],
            },
        )
    ]


def body_size_patches(max_bytes: int) -> list[dict[str, Any]]:
    limit = max_bytes or UNLIMITED_BODY_SIZE_BYTES
    return [
        {
            "applyTo": "NETWORK_FILTER",
            "match": {
                "context": "GATEWAY",
                "listener": {"filterChain": {"filter": {"name": _HCM}}},
            },
            "patch": {
                "operation": "MERGE",
                "value": {
                    "typed_config": {
                        "@type": "type.googleapis.com/envoy.extensions.filters.network"
                        ".http_connection_manager.v3.HttpConnectionManager",
                        "route_config": {
                            "max_direct_response_body_size_bytes": limit
                        },
                    }
                },
            },
        },
        _insert_http_filter(
            "envoy.filters.http.buffer",
            "type.googleapis.com/envoy.extensions.filters.http.buffer.v3.Buffer",
            {"max_request_bytes": limit},
        ),
    ]


def no_buffer_patches() -> list[dict[str, Any]]:
    threshold = {
        "max_pending_requests": CIRCUIT_BREAKER_LIMIT,
        "max_requests": CIRCUIT_BREAKER_LIMIT,
    }
    return [
        {
            "applyTo": "CLUSTER",
            "match": {"context": "GATEWAY"},
            "patch": {
                "operation": "MERGE",
                "value": {
                    "circuit_breakers": {"thresholds": [threshold]},
                },
            },
        }
    ]


def auth_cluster(url: str) -> str:
    """Istio outbound cluster name for the auth service behind ``url``."""
    parts = urlsplit(url)
    host = parts.hostname or "ext-authz-service"
    port = parts.port or (443 if parts.scheme == "https" else 80)
    return f"outbound|{port}||{host}"


def ext_authz_patches(auth: ExternalAuthConfig) -> list[dict[str, Any]]:
    upstream_headers = auth.response_headers or list(DEFAULT_AUTH_UPSTREAM_HEADERS)
    return [
        _insert_http_filter(
            "envoy.filters.http.ext_authz",
            "type.googleapis.com/envoy.extensions.filters.http.ext_authz.v3.ExtAuthz",
            {
                "http_service": {
                    "server_uri": {
                        "uri": auth.url,
                        "cluster": auth_cluster(auth.url),
                        "timeout": EXT_AUTHZ_TIMEOUT,
                    },
                    "authorization_request": {
                        "allowed_headers": {
                            "patterns": [
                                {"exact": "authorization"},
                                {"exact": "cookie"},
                                {"prefix": "x-"},
                            ]
                        }
                    },
                    "authorization_response": {
                        "allowed_upstream_headers": {
                            "patterns": [
                                {"exact": header.lower()} for header in upstream_headers
                            ]
                        }
                    },
                },
                "failure_mode_allow": False,
            },
        )
    ]


class EnvoyFilterBuilder:
    """Builds the EnvoyFilters for one route's ingress-nginx extensions."""

    def __init__(self, gateway_config: GatewayConfig):
        self._config = gateway_config
        self._logger = logger.getChild(self.__class__.__name__)

    def build(
        self, route_key: NamespacedName, ext: IngressNginxRouteIR
    ) -> list[UnstructuredObject]:
        concerns: list[tuple[str, list[dict[str, Any]]]] = []
        if ext.has_rate_limit:
            patches = rate_limit_patches(ext.rate_limit_rps, ext.rate_limit_burst)
            concerns.append(("ratelimit", patches))
        if ext.proxy_body_size is not None:
            concerns.append(("bodysize", body_size_patches(ext.proxy_body_size.bytes)))
        if ext.buffering_disabled:
            concerns.append(("nobuffer", no_buffer_patches()))
        if ext.external_auth is not None:
            concerns.append(("extauthz", ext_authz_patches(ext.external_auth)))

        return [
            self._wrap(route_key, concern, patches) for concern, patches in concerns
        ]

    def filter_key(self, route_key: NamespacedName, concern: str) -> NamespacedName:
        return NamespacedName(
            self._config.filter_namespace(route_key.namespace),
            f"{route_key.namespace}-{route_key.name}-{concern}",
        )

    def _wrap(
        self,
        route_key: NamespacedName,
        concern: str,
        patches: list[dict[str, Any]],
    ) -> UnstructuredObject:
        key = self.filter_key(route_key, concern)
        gateway = self._config.gateway_ref(route_key.namespace)
        return UnstructuredObject(
            content={
                "apiVersion": ENVOY_FILTER_API_VERSION,
                "kind": "EnvoyFilter",
                "metadata": {
                    "name": key.name,
                    "namespace": key.namespace,
                    "labels": generated_labels(),
                    "annotations": generated_annotations(
                        f"HTTPRoute/{route_key}", f"{concern} for {route_key}"
                    ),
                },
                "spec": {
                    "targetRefs": [
                        {
                            "group": GATEWAY_GROUP,
                            "kind": "Gateway",
                            "namespace": gateway.namespace,
                            "name": gateway.name,
                        }
                    ],
                    "configPatches": patches,
                },
            }
        )
