"""Downstream mutual TLS (``auth-tls-*`` annotations)."""

from __future__ import annotations

from typing import Any

from ....core.validation import FieldError, invalid, not_supported, required
from ....ir.models import IR, ClientCertAuthConfig, ClientCertVerifyMode
from ....models.kubernetes import Ingress
from .. import annotations as a
from ..context import annotation_path
from .base import IngressNginxFeature

DEFAULT_VERIFY_DEPTH = 1


class ClientCertAuthFeature(IngressNginxFeature):
    """
    ``auth-tls-secret`` enables the feature. Out-of-range verification
    settings are reported and replaced by the defaults (verification on,
    depth 1) rather than dropping the whole configuration.
    """

    name = "client_cert_auth"
    triggers = (a.AUTH_TLS_SECRET,)

    def parse(
        self, ingress: Ingress, errors: list[FieldError]
    ) -> ClientCertAuthConfig | None:
        secret = self._annotation(ingress, a.AUTH_TLS_SECRET)
        if not secret:
            if secret is not None:
                errors.append(
                    required(
                        annotation_path(ingress, a.AUTH_TLS_SECRET), "must not be empty"
                    )
                )
            return None

        verify_client = ClientCertVerifyMode.REQUIRED
        raw_mode = self._annotation(ingress, a.AUTH_TLS_VERIFY_CLIENT)
        if raw_mode:
            try:
                verify_client = ClientCertVerifyMode(raw_mode.lower())
            except ValueError:
                errors.append(
                    not_supported(
                        annotation_path(ingress, a.AUTH_TLS_VERIFY_CLIENT),
                        raw_mode,
                        [m.value for m in ClientCertVerifyMode],
                    )
                )

        verify_depth = DEFAULT_VERIFY_DEPTH
        raw_depth = self._annotation(ingress, a.AUTH_TLS_VERIFY_DEPTH)
        if raw_depth:
            try:
                verify_depth = int(raw_depth)
                if verify_depth < 0:
                    raise ValueError(raw_depth)
            except ValueError:
                verify_depth = DEFAULT_VERIFY_DEPTH
                errors.append(
                    invalid(
                        annotation_path(ingress, a.AUTH_TLS_VERIFY_DEPTH),
                        raw_depth,
                        "must be a non-negative integer",
                    )
                )

        pass_cert = self._annotation(ingress, a.AUTH_TLS_PASS_CERTIFICATE_TO_UPSTREAM)
        return ClientCertAuthConfig(
            secret=secret,
            verify_client=verify_client,
            verify_depth=verify_depth,
            error_page=self._annotation(ingress, a.AUTH_TLS_ERROR_PAGE) or None,
            pass_certificate_to_upstream=(pass_cert or "").lower() == "true",
        )

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        config = self.parse(ingress, errors)
        if config is None:
            return errors
        for _, route_ctx in context.routes_for(ingress, ir):
            self._set_route_field(
                route_ctx, "client_cert_auth", config, ingress, context
            )
        return errors
