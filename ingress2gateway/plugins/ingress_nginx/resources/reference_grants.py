"""ReferenceGrants letting routes attach to a Gateway in another namespace."""

from __future__ import annotations

from ....models.gateway_api import (
    GATEWAY_GROUP,
    ObjectMeta,
    ReferenceGrant,
    ReferenceGrantFrom,
    ReferenceGrantSpec,
    ReferenceGrantTo,
)
from ....models.kubernetes import NamespacedName
from .common import (
    DESCRIPTION_ANNOTATION,
    SOURCE_NAMESPACE_ANNOTATION,
    generated_labels,
)

ROUTE_KINDS = ("HTTPRoute", "GRPCRoute")


def grant_key(route_namespace: str, gateway: NamespacedName) -> NamespacedName:
    return NamespacedName(gateway.namespace, f"allow-routes-from-{route_namespace}")


def build_reference_grant(
    route_namespace: str, gateway: NamespacedName
) -> ReferenceGrant:
    key = grant_key(route_namespace, gateway)
    return ReferenceGrant(
        metadata=ObjectMeta(
            name=key.name,
            namespace=key.namespace,
            labels=generated_labels(),
            annotations={
                SOURCE_NAMESPACE_ANNOTATION: route_namespace,
                DESCRIPTION_ANNOTATION: (
                    f"Allows routes in {route_namespace} to attach to Gateway "
                    f"{gateway}"
                ),
            },
        ),
        spec=ReferenceGrantSpec(
            from_=[
                ReferenceGrantFrom(
                    group=GATEWAY_GROUP, kind=kind, namespace=route_namespace
                )
                for kind in ROUTE_KINDS
            ],
            to=[
                ReferenceGrantTo(group=GATEWAY_GROUP, kind="Gateway", name=gateway.name)
            ],
        ),
    )
