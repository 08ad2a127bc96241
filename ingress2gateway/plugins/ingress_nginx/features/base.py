"""Shared parsing helpers for ingress-nginx feature passes."""

from __future__ import annotations

from typing import Any

from ....core.common.base_feature import BaseFeaturePass
from ....core.notifications import Severity
from ....core.validation import FieldError, invalid, not_supported
from ....ir.models import HTTPRouteContext
from ....models.kubernetes import Ingress
from ..context import FeatureContext, annotation_path

_TRUE_VALUES = {"on", "true", "1"}
_FALSE_VALUES = {"off", "false", "0"}


class IngressNginxFeature(BaseFeaturePass):
    """Base class for passes reading ``nginx.ingress.kubernetes.io/*`` annotations."""

    @staticmethod
    def _annotation(ingress: Ingress, key: str) -> str | None:
        value = ingress.annotations.get(key)
        if value is None:
            return None
        return value.strip()

    def _parse_int(
        self,
        ingress: Ingress,
        key: str,
        errors: list[FieldError],
        minimum: int = 0,
    ) -> int | None:
        """Integer annotation value; absent or empty gives None."""
        raw = self._annotation(ingress, key)
        if not raw:
            return None
        try:
            value = int(raw)
        except ValueError:
            errors.append(
                invalid(annotation_path(ingress, key), raw, "must be an integer")
            )
            return None
        if value < minimum:
            errors.append(
                invalid(
                    annotation_path(ingress, key),
                    raw,
                    f"must be greater than or equal to {minimum}",
                )
            )
            return None
        return value

    def _parse_flag(
        self, ingress: Ingress, key: str, errors: list[FieldError]
    ) -> bool | None:
        """Tri-state on/off annotation."""
        raw = self._annotation(ingress, key)
        if not raw:
            return None
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        errors.append(
            not_supported(annotation_path(ingress, key), raw, ["on", "off"])
        )
        return None

    def _set_route_field(
        self,
        route_ctx: HTTPRouteContext,
        field_name: str,
        value: Any,
        ingress: Ingress,
        context: FeatureContext,
    ) -> None:
        """Write one extension field; a differing earlier value is reported."""
        ext = route_ctx.ingress_nginx()
        current = getattr(ext, field_name)
        if current is not None and current != value:
            context.notifier.emit(
                Severity.WARNING,
                f"conflicting values for '{field_name}' on HTTPRoute "
                f"{route_ctx.http_route.key}: {current!r} replaced by {value!r}",
                ingress.key,
            )
        setattr(ext, field_name, value)
