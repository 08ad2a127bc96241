"""Tells the user which EnvoyFilters an object will turn into."""

from __future__ import annotations

from typing import Any

from ....core.notifications import Severity
from ....core.validation import FieldError
from ....ir.models import IR
from ....models.kubernetes import Ingress
from .. import annotations as a
from .base import IngressNginxFeature

_CONCERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("rate-limiting", (a.LIMIT_RPS, a.LIMIT_RPM, a.LIMIT_REQ_ZONE)),
    ("body-size", (a.PROXY_BODY_SIZE,)),
    ("no-buffering", (a.PROXY_BUFFERING,)),
    ("ext-authz", (a.AUTH_URL,)),
)


class FilterChainNoticeFeature(IngressNginxFeature):
    name = "filter_chain_notice"
    triggers = tuple(key for _, keys in _CONCERNS for key in keys)

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        concerns = [
            concern
            for concern, keys in _CONCERNS
            if any(self._annotation(ingress, key) for key in keys)
        ]
        buffering = (self._annotation(ingress, a.PROXY_BUFFERING) or "").lower()
        if buffering not in ("off", "false", "0") and "no-buffering" in concerns:
            concerns.remove("no-buffering")
        if concerns and context.route_keys_for(ingress):
            context.notifier.emit(
                Severity.INFO,
                "EnvoyFilter resources will be generated for: " + ", ".join(concerns),
                ingress.key,
            )
        return []
