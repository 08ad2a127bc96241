"""HTTP to HTTPS redirection (``ssl-redirect`` / ``force-ssl-redirect``)."""

from __future__ import annotations

from typing import Any

from ....core.notifications import Severity
from ....core.validation import FieldError
from ....ir.models import IR
from ....models.kubernetes import Ingress
from .. import annotations as a
from .base import IngressNginxFeature


class SSLRedirectFeature(IngressNginxFeature):
    name = "ssl_redirect"
    triggers = (a.SSL_REDIRECT, a.FORCE_SSL_REDIRECT)

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        enabled = any(
            (self._annotation(ingress, key) or "").lower() == "true"
            for key in self.triggers
        )
        if not enabled:
            return []
        for route_key, route_ctx in context.routes_for(ingress, ir):
            self._set_route_field(route_ctx, "ssl_redirect", True, ingress, context)
            context.notifier.emit(
                Severity.INFO,
                f"HTTPRoute {route_key} flagged for HTTP to HTTPS redirect",
                ingress.key,
            )
        return []
