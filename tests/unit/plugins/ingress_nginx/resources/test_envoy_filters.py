from __future__ import annotations

import pytest

from ingress2gateway.ir.models import BodySize, ExternalAuthConfig, IngressNginxRouteIR
from ingress2gateway.models.kubernetes import NamespacedName
from ingress2gateway.plugins.ingress_nginx.config import GatewayConfig, GatewayMode
from ingress2gateway.plugins.ingress_nginx.resources.envoy_filters import (
    EnvoyFilterBuilder,
    auth_cluster,
    body_size_patches,
    ext_authz_patches,
    no_buffer_patches,
    rate_limit_patches,
)

ROUTE = NamespacedName("shop", "web-shop-example-com")


def _typed_config(patches):
    return patches[-1]["patch"]["value"]["typed_config"]


class TestPatches:
    def test_rate_limit_default_burst(self) -> None:
        bucket = _typed_config(rate_limit_patches(1000, None))["token_bucket"]

        assert bucket == {
            "max_tokens": 5000,
            "tokens_per_fill": 1000,
            "fill_interval": "1s",
        }

    def test_rate_limit_explicit_burst(self) -> None:
        bucket = _typed_config(rate_limit_patches(10, 30))["token_bucket"]

        assert bucket["max_tokens"] == 30

    def test_rate_limit_inserted_before_router(self) -> None:
        [patch] = rate_limit_patches(1, None)

        assert patch["applyTo"] == "HTTP_FILTER"
        assert patch["patch"]["operation"] == "INSERT_BEFORE"
        listener = patch["match"]["listener"]
        assert listener["filterChain"]["filter"]["subFilter"]["name"] == (
            "envoy.filters.http.router"
        )

    def test_body_size(self) -> None:
        hcm, buffer = body_size_patches(8 * 1024**2)

        route_config = hcm["patch"]["value"]["typed_config"]["route_config"]
        assert hcm["patch"]["operation"] == "MERGE"
        assert route_config["max_direct_response_body_size_bytes"] == 8 * 1024**2
        assert _typed_config([buffer])["max_request_bytes"] == 8 * 1024**2

    def test_unlimited_body_size_uses_large_cap(self) -> None:
        patches = body_size_patches(0)

        assert _typed_config(patches)["max_request_bytes"] == 1024**3

    def test_no_buffer(self) -> None:
        [patch] = no_buffer_patches()

        assert patch["applyTo"] == "CLUSTER"
        thresholds = patch["patch"]["value"]["circuit_breakers"]["thresholds"]
        assert thresholds == [{"max_pending_requests": 100000, "max_requests": 100000}]

    @pytest.mark.parametrize(
        "url, expected",
        [
            (
                "http://auth.security.svc:9000/verify",
                "outbound|9000||auth.security.svc",
            ),
            ("https://auth.example.com/check", "outbound|443||auth.example.com"),
            ("http://oauth2-proxy/oauth2/auth", "outbound|80||oauth2-proxy"),
        ],
    )
    def test_auth_cluster(self, url: str, expected: str) -> None:
        assert auth_cluster(url) == expected

    def test_ext_authz_default_headers(self) -> None:
        config = ExternalAuthConfig(url="http://auth/verify")

        service = _typed_config(ext_authz_patches(config))["http_service"]

        assert service["server_uri"]["uri"] == "http://auth/verify"
        assert service["server_uri"]["timeout"] == "5s"
        upstream = service["authorization_response"]["allowed_upstream_headers"]
        assert upstream["patterns"] == [
            {"exact": "authorization"},
            {"exact": "x-forwarded-user"},
            {"exact": "x-forwarded-email"},
        ]

    def test_ext_authz_forwards_response_headers(self) -> None:
        config = ExternalAuthConfig(
            url="http://auth/verify", response_headers=["X-User", "X-Groups"]
        )

        typed = _typed_config(ext_authz_patches(config))

        upstream = typed["http_service"]["authorization_response"][
            "allowed_upstream_headers"
        ]
        assert upstream["patterns"] == [{"exact": "x-user"}, {"exact": "x-groups"}]
        assert typed["failure_mode_allow"] is False


class TestEnvoyFilterBuilder:
    def test_one_filter_per_concern(self) -> None:
        ext = IngressNginxRouteIR(
            rate_limit_rps=10,
            proxy_body_size=BodySize(raw="1m", bytes=1024**2),
            proxy_buffering=False,
            external_auth=ExternalAuthConfig(url="http://auth/verify"),
        )

        filters = EnvoyFilterBuilder(GatewayConfig()).build(ROUTE, ext)

        assert [f.key for f in filters] == [
            NamespacedName("istio-system", f"shop-web-shop-example-com-{concern}")
            for concern in ("ratelimit", "bodysize", "nobuffer", "extauthz")
        ]
        assert {f.kind for f in filters} == {"EnvoyFilter"}

    def test_centralized_targets_shared_gateway(self) -> None:
        ext = IngressNginxRouteIR(rate_limit_rps=10)

        [envoy_filter] = EnvoyFilterBuilder(GatewayConfig()).build(ROUTE, ext)

        manifest = envoy_filter.to_manifest()
        assert manifest["apiVersion"] == "networking.istio.io/v1alpha3"
        assert manifest["metadata"]["namespace"] == "istio-system"
        assert manifest["spec"]["targetRefs"] == [
            {
                "group": "gateway.networking.k8s.io",
                "kind": "Gateway",
                "namespace": "istio-system",
                "name": "platform-gateway",
            }
        ]
        assert manifest["metadata"]["labels"] == {
            "app.kubernetes.io/managed-by": "ingress2gateway",
            "gateway-api-migration": "true",
        }

    def test_per_namespace_co_located_with_route(self) -> None:
        config = GatewayConfig(mode=GatewayMode.PER_NAMESPACE)
        ext = IngressNginxRouteIR(proxy_buffering=False)

        [envoy_filter] = EnvoyFilterBuilder(config).build(ROUTE, ext)

        manifest = envoy_filter.to_manifest()
        assert envoy_filter.key == NamespacedName(
            "shop", "shop-web-shop-example-com-nobuffer"
        )
        assert manifest["metadata"]["namespace"] == "shop"
        [ref] = manifest["spec"]["targetRefs"]
        assert NamespacedName(ref["namespace"], ref["name"]) == config.gateway_ref(
            "shop"
        )

    def test_nothing_for_unrelated_extensions(self) -> None:
        ext = IngressNginxRouteIR(ssl_redirect=True, proxy_buffering=True)

        assert EnvoyFilterBuilder(GatewayConfig()).build(ROUTE, ext) == []

    def test_zero_rate_is_not_a_limit(self) -> None:
        ext = IngressNginxRouteIR(rate_limit_rps=0, rate_limit_connections=5)

        assert EnvoyFilterBuilder(GatewayConfig()).build(ROUTE, ext) == []
