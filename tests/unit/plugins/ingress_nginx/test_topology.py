from __future__ import annotations

from ingress2gateway.core.common.route_resolver import ir_to_gateway_resources
from ingress2gateway.models.kubernetes import NamespacedName
from ingress2gateway.plugins.ingress_nginx.config import GatewayConfig, GatewayMode
from ingress2gateway.plugins.ingress_nginx.topology import (
    TopologyTransform,
    parent_ref_key,
)

PER_NAMESPACE = GatewayConfig(mode=GatewayMode.PER_NAMESPACE)


def _refs(resources, key: NamespacedName) -> list[tuple[str | None, str]]:
    return [(r.namespace, r.name) for r in resources.http_routes[key].spec.parent_refs]


class TestCentralized:
    def test_routes_attach_to_shared_gateway(self, make_ingress, lower) -> None:
        _, ir = lower(
            make_ingress(namespace="shop", hosts=["shop.example.com"]),
            make_ingress(namespace="blog", hosts=["blog.example.com"]),
        )
        resources = ir_to_gateway_resources(ir)

        TopologyTransform(GatewayConfig()).apply(resources)

        assert resources.gateways == {}
        for key in resources.http_routes:
            assert _refs(resources, key) == [("istio-system", "platform-gateway")]

    def test_custom_gateway(self, make_ingress, lower) -> None:
        _, ir = lower(make_ingress())
        resources = ir_to_gateway_resources(ir)
        config = GatewayConfig(namespace="edge", name="public")

        TopologyTransform(config).apply(resources)

        key = NamespacedName("default", "web-example-com")
        assert _refs(resources, key) == [("edge", "public")]


class TestPerNamespace:
    def test_distinct_gateway_per_namespace(self, make_ingress, lower) -> None:
        _, ir = lower(
            make_ingress(namespace="shop", hosts=["shop.example.com"]),
            make_ingress(namespace="blog", hosts=["blog.example.com"]),
        )
        resources = ir_to_gateway_resources(ir)

        TopologyTransform(PER_NAMESPACE).apply(resources)

        assert sorted(resources.gateways) == [
            NamespacedName("blog-gateway", "blog-gateway"),
            NamespacedName("shop-gateway", "shop-gateway"),
        ]
        shop_route = NamespacedName("shop", "web-shop-example-com")
        blog_route = NamespacedName("blog", "web-blog-example-com")
        assert _refs(resources, shop_route) == [("shop-gateway", "shop-gateway")]
        assert _refs(resources, blog_route) == [("blog-gateway", "blog-gateway")]

    def test_listeners_kept_per_namespace(self, make_ingress, lower) -> None:
        _, ir = lower(
            make_ingress(
                namespace="shop",
                hosts=["shop.example.com"],
                tls_hosts=["shop.example.com"],
            ),
            make_ingress(namespace="blog", hosts=["blog.example.com"]),
        )
        resources = ir_to_gateway_resources(ir)

        TopologyTransform(PER_NAMESPACE).apply(resources)

        shop = resources.gateways[NamespacedName("shop-gateway", "shop-gateway")]
        blog = resources.gateways[NamespacedName("blog-gateway", "blog-gateway")]
        assert [ls.name for ls in shop.spec.listeners] == [
            "shop-example-com-http",
            "shop-example-com-https",
        ]
        assert [ls.name for ls in blog.spec.listeners] == ["blog-example-com-http"]
        assert shop.spec.gateway_class_name == "istio"
        assert shop.metadata.labels["gateway-api-migration"] == "true"

    def test_classes_in_one_namespace_merge(self, make_ingress, lower) -> None:
        _, ir = lower(
            make_ingress(name="a", namespace="shop", hosts=["a.example.com"]),
            make_ingress(
                name="b",
                namespace="shop",
                hosts=["b.example.com"],
                ingress_class="internal",
            ),
        )
        resources = ir_to_gateway_resources(ir)

        TopologyTransform(PER_NAMESPACE).apply(resources)

        [gateway] = resources.gateways.values()
        assert sorted(ls.name for ls in gateway.spec.listeners) == [
            "a-example-com-http",
            "b-example-com-http",
        ]

    def test_shared_tls_host_keeps_every_certificate(
        self, make_ingress, lower
    ) -> None:
        _, ir = lower(
            make_ingress(name="a", namespace="shop", tls_hosts=["example.com"]),
            make_ingress(
                name="b",
                namespace="shop",
                tls_hosts=["example.com"],
                ingress_class="internal",
            ),
        )
        resources = ir_to_gateway_resources(ir)

        TopologyTransform(PER_NAMESPACE).apply(resources)

        [gateway] = resources.gateways.values()
        [https] = [ls for ls in gateway.spec.listeners if ls.protocol == "HTTPS"]
        assert sorted(ref.name for ref in https.tls.certificate_refs) == [
            "a-tls",
            "b-tls",
        ]


def test_parent_ref_key_defaults_to_route_namespace(make_ingress, lower) -> None:
    _, ir = lower(make_ingress(namespace="shop"))
    route = ir.http_routes[NamespacedName("shop", "web-example-com")].http_route

    assert parent_ref_key(route, route.spec.parent_refs[0]) == NamespacedName(
        "shop", "nginx"
    )
