from __future__ import annotations

from ingress2gateway.ir.models import HTTPRouteContext
from ingress2gateway.models.gateway_api import (
    HTTPRoute,
    HTTPRouteSpec,
    ObjectMeta,
)
from ingress2gateway.models.kubernetes import NamespacedName
from ingress2gateway.plugins.ingress_nginx.config import GatewayConfig, GatewayMode
from ingress2gateway.plugins.ingress_nginx.resources.redirect_routes import (
    RedirectRouteBuilder,
    redirect_route_key,
)

ROUTE = NamespacedName("shop", "web")


def _route_ctx(hostnames: list[str]) -> HTTPRouteContext:
    return HTTPRouteContext(
        http_route=HTTPRoute(
            metadata=ObjectMeta(name=ROUTE.name, namespace=ROUTE.namespace),
            spec=HTTPRouteSpec(hostnames=hostnames),
        )
    )


class TestRedirectRouteKey:
    def test_single_host(self) -> None:
        key = redirect_route_key(ROUTE, "a.example.com", ["a.example.com"])

        assert key == NamespacedName("shop", "web-redirect")

    def test_several_hosts_get_host_suffix(self) -> None:
        hosts = ["a.example.com", "*.example.com"]

        keys = [redirect_route_key(ROUTE, host, hosts) for host in hosts]

        assert keys == [
            NamespacedName("shop", "web-a-example-com-redirect"),
            NamespacedName("shop", "web-wildcard-example-com-redirect"),
        ]


class TestRedirectRouteBuilder:
    def test_attaches_to_plain_http_listener_only(self) -> None:
        [route] = RedirectRouteBuilder(GatewayConfig()).build(
            ROUTE, _route_ctx(["a.example.com"])
        )

        [parent] = route.spec.parent_refs
        assert parent.namespace == "istio-system"
        assert parent.name == "platform-gateway"
        assert parent.section_name == "a-example-com-http"
        assert route.spec.hostnames == ["a.example.com"]

    def test_rule_is_permanent_https_redirect(self) -> None:
        [route] = RedirectRouteBuilder(GatewayConfig()).build(
            ROUTE, _route_ctx(["a.example.com"])
        )

        manifest = route.to_manifest()
        assert manifest["spec"]["rules"] == [
            {
                "filters": [
                    {
                        "type": "RequestRedirect",
                        "requestRedirect": {"scheme": "https", "statusCode": 301},
                    }
                ]
            }
        ]
        assert manifest["metadata"]["labels"]["gateway-api-migration"] == "true"

    def test_per_namespace_gateway(self) -> None:
        config = GatewayConfig(mode=GatewayMode.PER_NAMESPACE)

        [route] = RedirectRouteBuilder(config).build(ROUTE, _route_ctx(["a.io"]))

        parent = route.spec.parent_refs[0]
        assert (parent.namespace, parent.name) == ("shop-gateway", "shop-gateway")

    def test_one_route_per_host(self) -> None:
        routes = RedirectRouteBuilder(GatewayConfig()).build(
            ROUTE, _route_ctx(["a.io", "b.io"])
        )

        assert [r.spec.parent_refs[0].section_name for r in routes] == [
            "a-io-http",
            "b-io-http",
        ]

    def test_no_hostnames(self) -> None:
        assert RedirectRouteBuilder(GatewayConfig()).build(ROUTE, _route_ctx([])) == []
