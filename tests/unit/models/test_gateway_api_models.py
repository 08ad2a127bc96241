from __future__ import annotations

import pytest
from pydantic import ValidationError

from ingress2gateway.models.gateway_api import (
    Gateway,
    GatewayResources,
    GatewaySpec,
    HTTPRoute,
    HTTPRouteSpec,
    Listener,
    ObjectMeta,
    ParentReference,
    ReferenceGrant,
    ReferenceGrantFrom,
    ReferenceGrantSpec,
    ReferenceGrantTo,
    UnstructuredObject,
)
from ingress2gateway.models.kubernetes import NamespacedName


def _route(namespace: str, name: str) -> HTTPRoute:
    return HTTPRoute(metadata=ObjectMeta(name=name, namespace=namespace))


class TestManifests:
    def test_gateway_uses_wire_names(self) -> None:
        gateway = Gateway(
            metadata=ObjectMeta(name="gw", namespace="edge"),
            spec=GatewaySpec(
                gateway_class_name="istio",
                listeners=[Listener(name="a-http", port=80, protocol="HTTP")],
            ),
        )

        assert gateway.to_manifest() == {
            "apiVersion": "gateway.networking.k8s.io/v1",
            "kind": "Gateway",
            "metadata": {"name": "gw", "namespace": "edge"},
            "spec": {
                "gatewayClassName": "istio",
                "listeners": [{"name": "a-http", "port": 80, "protocol": "HTTP"}],
            },
        }

    def test_populate_by_alias(self) -> None:
        ref = ParentReference.model_validate({"name": "gw", "sectionName": "a-http"})

        assert ref.section_name == "a-http"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParentReference(name="gw", port=80)

    def test_reference_grant_from_alias(self) -> None:
        grant = ReferenceGrant(
            metadata=ObjectMeta(name="g", namespace="edge"),
            spec=ReferenceGrantSpec(
                from_=[ReferenceGrantFrom(group="g", kind="HTTPRoute", namespace="a")],
                to=[ReferenceGrantTo(group="g", kind="Gateway")],
            ),
        )

        spec = grant.to_manifest()["spec"]
        assert "from" in spec
        assert spec["to"] == [{"group": "g", "kind": "Gateway"}]


class TestUnstructuredObject:
    def test_key_and_copy(self) -> None:
        content = {"kind": "EnvoyFilter", "metadata": {"name": "f", "namespace": "n"}}
        obj = UnstructuredObject(content=content)

        manifest = obj.to_manifest()
        manifest["metadata"]["name"] = "changed"

        assert obj.kind == "EnvoyFilter"
        assert obj.key == NamespacedName("n", "f")
        assert obj.content["metadata"]["name"] == "f"


class TestGatewayResources:
    def test_all_objects_grouped_and_sorted(self) -> None:
        resources = GatewayResources(
            http_routes={
                NamespacedName("b", "r"): _route("b", "r"),
                NamespacedName("a", "r"): _route("a", "r"),
            },
            gateways={
                NamespacedName("edge", "gw"): Gateway(
                    metadata=ObjectMeta(name="gw", namespace="edge"),
                    spec=GatewaySpec(gateway_class_name="istio"),
                )
            },
        )

        objects = resources.all_objects()

        assert [(o.kind, o.key) for o in objects] == [
            ("Gateway", ("edge", "gw")),
            ("HTTPRoute", ("a", "r")),
            ("HTTPRoute", ("b", "r")),
        ]

    def test_empty(self) -> None:
        assert GatewayResources().all_objects() == []


def test_route_spec_defaults() -> None:
    spec = HTTPRouteSpec()

    assert spec.parent_refs == []
    assert spec.hostnames == []
    assert spec.rules == []
