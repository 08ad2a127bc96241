"""External authorization (``auth-url`` and companions)."""

from __future__ import annotations

from typing import Any

from ....core.validation import FieldError, required
from ....ir.models import IR, ExternalAuthConfig
from ....models.kubernetes import Ingress
from .. import annotations as a
from ..context import annotation_path
from .base import IngressNginxFeature


def split_headers(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [h.strip() for h in raw.split(",") if h.strip()]


class ExternalAuthFeature(IngressNginxFeature):
    name = "external_auth"
    triggers = (a.AUTH_URL,)

    def parse(
        self, ingress: Ingress, errors: list[FieldError]
    ) -> ExternalAuthConfig | None:
        url = self._annotation(ingress, a.AUTH_URL)
        if not url:
            if url is not None:
                errors.append(
                    required(annotation_path(ingress, a.AUTH_URL), "must not be empty")
                )
            return None
        return ExternalAuthConfig(
            url=url,
            method=self._annotation(ingress, a.AUTH_METHOD) or "GET",
            signin_url=self._annotation(ingress, a.AUTH_SIGNIN) or None,
            response_headers=split_headers(
                self._annotation(ingress, a.AUTH_RESPONSE_HEADERS)
            ),
            request_redirect=self._annotation(ingress, a.AUTH_REQUEST_REDIRECT)
            or None,
            cache_key=self._annotation(ingress, a.AUTH_CACHE_KEY) or None,
            cache_duration=self._annotation(ingress, a.AUTH_CACHE_DURATION) or None,
        )

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        config = self.parse(ingress, errors)
        if config is None:
            return errors
        for _, route_ctx in context.routes_for(ingress, ir):
            self._set_route_field(route_ctx, "external_auth", config, ingress, context)
        return errors
