"""
Detection of annotations that cannot be migrated automatically.

Free-form nginx configuration and regex-based rewriting have no Gateway API
counterpart; they are reported as blockers so a human reviews them before
traffic is moved. Auth annotations get informational guidance instead.
"""

from __future__ import annotations

from typing import Any

from ....core.notifications import Severity
from ....core.validation import FieldError
from ....ir.models import IR
from ....models.kubernetes import Ingress
from .. import annotations as a
from .base import IngressNginxFeature

MAX_VALUE_LENGTH = 200

_BLOCKERS: dict[str, str] = {
    a.SERVER_SNIPPET: (
        "server-snippet injects raw nginx server configuration; rewrite it as "
        "Gateway API filters or an EnvoyFilter"
    ),
    a.CONFIGURATION_SNIPPET: (
        "configuration-snippet injects raw nginx location configuration; rewrite "
        "it as HTTPRoute filters or an EnvoyFilter"
    ),
    a.STREAM_SNIPPET: (
        "stream-snippet injects raw nginx stream configuration; model it with "
        "TCPRoute/TLSRoute by hand"
    ),
    a.AUTH_SNIPPET: (
        "auth-snippet injects raw nginx configuration into the auth subrequest; "
        "move the logic into the external auth service"
    ),
    a.USE_REGEX: (
        "use-regex enables nginx regex path matching; convert paths to "
        "RegularExpression matches and verify precedence"
    ),
}

_GUIDANCE: dict[str, str] = {
    a.AUTH_URL: (
        "external auth is migrated to an ext_authz EnvoyFilter; verify the auth "
        "service is reachable from the gateway"
    ),
    a.AUTH_TLS_SECRET: (
        "client certificate auth requires the CA bundle on the Gateway listener; "
        "verify the frontend TLS validation settings"
    ),
}


def truncate(value: str, limit: int = MAX_VALUE_LENGTH) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "... (truncated)"


class BlockerDetectionFeature(IngressNginxFeature):
    """Reports unsupported free-form annotations; never touches the IR."""

    name = "blockers"
    triggers = tuple(_BLOCKERS) + tuple(_GUIDANCE) + (a.REWRITE_TARGET,)

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        notifier = context.notifier
        for key, remediation in _BLOCKERS.items():
            value = ingress.annotations.get(key)
            if value is None:
                continue
            notifier.emit(
                Severity.BLOCKER,
                f"MIGRATION BLOCKER - {remediation}. Value: {truncate(value)}",
                ingress.key,
            )

        rewrite = ingress.annotations.get(a.REWRITE_TARGET)
        if rewrite is not None:
            if "$" in rewrite:
                notifier.emit(
                    Severity.BLOCKER,
                    "MIGRATION BLOCKER - rewrite-target uses regex capture groups; "
                    "HTTPRoute URLRewrite cannot reference captures. "
                    f"Value: {truncate(rewrite)}",
                    ingress.key,
                )
            else:
                notifier.emit(
                    Severity.WARNING,
                    "rewrite-target is not converted; add an HTTPRoute URLRewrite "
                    f"filter. Value: {truncate(rewrite)}",
                    ingress.key,
                )

        for key, guidance in _GUIDANCE.items():
            if ingress.annotations.get(key):
                notifier.emit(
                    Severity.INFO, f"AUTH CONFIG GENERATED - {guidance}", ingress.key
                )
        return []
