"""Proxy timeouts mapped onto HTTPRoute rule timeouts."""

from __future__ import annotations

from typing import Any

from ....core.validation import FieldError
from ....ir.models import IR
from ....models.gateway_api import HTTPRouteTimeouts
from ....models.kubernetes import Ingress
from .. import annotations as a
from .base import IngressNginxFeature


def format_seconds(seconds: int) -> str:
    return f"{seconds}s"


class TimeoutFeature(IngressNginxFeature):
    """
    ``proxy-read-timeout`` and ``proxy-send-timeout`` bound the whole request,
    so the longer of the two becomes ``timeouts.request``;
    ``proxy-connect-timeout`` becomes ``timeouts.backendRequest``.
    """

    name = "timeout"
    triggers = (a.PROXY_CONNECT_TIMEOUT, a.PROXY_READ_TIMEOUT, a.PROXY_SEND_TIMEOUT)

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        connect = self._parse_int(ingress, a.PROXY_CONNECT_TIMEOUT, errors)
        read = self._parse_int(ingress, a.PROXY_READ_TIMEOUT, errors)
        send = self._parse_int(ingress, a.PROXY_SEND_TIMEOUT, errors)
        if errors:
            return errors

        request = max(read or 0, send or 0)
        backend_request = connect or 0
        if request <= 0 and backend_request <= 0:
            return errors

        for key, route_ctx in context.routes_for(ingress, ir):
            for rule in route_ctx.http_route.spec.rules:
                if rule.timeouts is None:
                    rule.timeouts = HTTPRouteTimeouts()
                if request > 0:
                    rule.timeouts.request = format_seconds(request)
                if backend_request > 0:
                    rule.timeouts.backend_request = format_seconds(backend_request)
            self._logger.debug(f"Applied timeouts from {ingress.key} to {key}")
        return errors
