"""Request body limits, buffering and upstream load balancing."""

from __future__ import annotations

import re
from typing import Any

from ....core.validation import FieldError, invalid, not_supported
from ....ir.models import IR, BodySize, ServiceContext
from ....models.kubernetes import Ingress, NamespacedName
from .. import annotations as a
from ..context import annotation_path
from .base import IngressNginxFeature

_SIZE = re.compile(r"^(\d+)([kmg]?)$", re.IGNORECASE)
_UNITS = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}
_UNLIMITED = {"0", "-1", "unlimited"}

LOAD_BALANCE_ALGORITHMS = ("round_robin", "ewma")


def parse_body_size(raw: str) -> int:
    """
    Parse an nginx size such as ``8m`` into bytes.

    ``0``, ``-1`` and ``unlimited`` disable the limit and parse to 0.

    Raises:
        ValueError: If the value is not ``<digits>[k|m|g]``.
    """
    value = raw.strip()
    if value.lower() in _UNLIMITED:
        return 0
    match = _SIZE.match(value)
    if match is None:
        raise ValueError(f"invalid size {raw!r}")
    return int(match.group(1)) * _UNITS[match.group(2).lower()]


class ProxySettingsFeature(IngressNginxFeature):
    name = "proxy_settings"
    triggers = (
        a.PROXY_BODY_SIZE,
        a.PROXY_BUFFERING,
        a.PROXY_REQUEST_BUFFERING,
        a.LOAD_BALANCE,
    )

    def _apply_to_ingress(
        self, ingress: Ingress, context: Any, ir: IR
    ) -> list[FieldError]:
        errors: list[FieldError] = []

        body_size: BodySize | None = None
        raw_size = (self._annotation(ingress, a.PROXY_BODY_SIZE) or "").strip()
        if raw_size:
            try:
                body_size = BodySize(raw=raw_size, bytes=parse_body_size(raw_size))
            except ValueError:
                errors.append(
                    invalid(
                        annotation_path(ingress, a.PROXY_BODY_SIZE),
                        raw_size,
                        "must be a size such as 1024, 8k, 10m or 1g",
                    )
                )

        buffering = self._parse_flag(ingress, a.PROXY_BUFFERING, errors)
        request_buffering = self._parse_flag(ingress, a.PROXY_REQUEST_BUFFERING, errors)

        for _, route_ctx in context.routes_for(ingress, ir):
            for field_name, value in (
                ("proxy_body_size", body_size),
                ("proxy_buffering", buffering),
                ("proxy_request_buffering", request_buffering),
            ):
                if value is not None:
                    self._set_route_field(
                        route_ctx, field_name, value, ingress, context
                    )

        algorithm = self._annotation(ingress, a.LOAD_BALANCE)
        if algorithm:
            if algorithm in LOAD_BALANCE_ALGORITHMS:
                self._apply_load_balance(ingress, ir, algorithm)
            else:
                errors.append(
                    not_supported(
                        annotation_path(ingress, a.LOAD_BALANCE),
                        algorithm,
                        list(LOAD_BALANCE_ALGORITHMS),
                    )
                )
        return errors

    @staticmethod
    def _apply_load_balance(ingress: Ingress, ir: IR, algorithm: str) -> None:
        namespace = ingress.metadata.namespace
        for backend in ingress.backends():
            svc_key = NamespacedName(namespace, backend.name)
            service = ir.services.setdefault(svc_key, ServiceContext())
            service.ingress_nginx().load_balance_algorithm = algorithm
