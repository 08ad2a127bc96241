"""Local rate limiting (``limit-*`` annotations)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ....core.validation import FieldError
from ....ir.models import IR
from ....models.kubernetes import Ingress
from .. import annotations as a
from .base import IngressNginxFeature

_ZONE_RATE = re.compile(r"rate=(\d+)r/([sm])")


def rpm_to_rps(rpm: int) -> int:
    """Requests per minute to per second, never rounding a positive rate to 0."""
    if rpm <= 0:
        return 0
    return max(1, rpm // 60)


def rps_from_zone(zone: str) -> int | None:
    """Rate of the first ``rate=<n>r/s`` or ``rate=<n>r/m`` in a zone definition."""
    match = _ZONE_RATE.search(zone)
    if match is None:
        return None
    value = int(match.group(1))
    if match.group(2) == "m":
        return rpm_to_rps(value)
    return value


@dataclass
class RateLimitConfig:
    rps: int | None = None
    burst: int | None = None
    connections: int | None = None


class RateLimitFeature(IngressNginxFeature):
    """
    Resolves a requests-per-second rate with the precedence ``limit-rps``,
    then ``limit-rpm``, then ``limit-req-zone``. The burst is the rate times
    ``limit-burst-multiplier`` when one is given.
    """

    name = "rate_limit"
    triggers = (
        a.LIMIT_RPS,
        a.LIMIT_RPM,
        a.LIMIT_CONNECTIONS,
        a.LIMIT_BURST_MULTIPLIER,
        a.LIMIT_REQ_ZONE,
    )

    def parse(
        self, ingress: Ingress, errors: list[FieldError]
    ) -> RateLimitConfig:
        config = RateLimitConfig()
        rps = self._parse_int(ingress, a.LIMIT_RPS, errors)
        rpm = self._parse_int(ingress, a.LIMIT_RPM, errors)
        multiplier = self._parse_int(
            ingress, a.LIMIT_BURST_MULTIPLIER, errors, minimum=1
        )
        config.connections = self._parse_int(ingress, a.LIMIT_CONNECTIONS, errors)

        if rps:
            config.rps = rps
        elif rpm:
            config.rps = rpm_to_rps(rpm)
        else:
            zone = self._annotation(ingress, a.LIMIT_REQ_ZONE)
            if zone:
                config.rps = rps_from_zone(zone)

        if config.rps and multiplier:
            config.burst = config.rps * multiplier
        return config

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        errors: list[FieldError] = []
        config = self.parse(ingress, errors)
        if errors:
            return errors
        if not config.rps and config.connections is None:
            return errors

        for _, route_ctx in context.routes_for(ingress, ir):
            if config.rps:
                self._set_route_field(
                    route_ctx, "rate_limit_rps", config.rps, ingress, context
                )
            if config.burst:
                self._set_route_field(
                    route_ctx, "rate_limit_burst", config.burst, ingress, context
                )
            if config.connections is not None:
                self._set_route_field(
                    route_ctx,
                    "rate_limit_connections",
                    config.connections,
                    ingress,
                    context,
                )
        return errors
