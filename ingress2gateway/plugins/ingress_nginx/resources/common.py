"""Metadata stamped on every object the provider generates."""

from __future__ import annotations

MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
MANAGED_BY = "ingress2gateway"
MIGRATION_LABEL = "gateway-api-migration"

SOURCE_ANNOTATION = "ingress2gateway.kubernetes.io/source"
DESCRIPTION_ANNOTATION = "ingress2gateway.kubernetes.io/description"
SOURCE_NAMESPACE_ANNOTATION = "ingress2gateway.kubernetes.io/source-namespace"


def generated_labels() -> dict[str, str]:
    return {MANAGED_BY_LABEL: MANAGED_BY, MIGRATION_LABEL: "true"}


def generated_annotations(
    source: str, description: str | None = None
) -> dict[str, str]:
    annotations = {SOURCE_ANNOTATION: source}
    if description:
        annotations[DESCRIPTION_ANNOTATION] = description
    return annotations
