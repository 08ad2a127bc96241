"""Gateway topology configuration for the ingress-nginx provider."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.exceptions import ConfigurationError
from ...models.kubernetes import NamespacedName

DEFAULT_INGRESS_CLASS = "nginx"
DEFAULT_GATEWAY_NAMESPACE = "istio-system"
DEFAULT_GATEWAY_NAME = "platform-gateway"
DEFAULT_GATEWAY_CLASS = "istio"

FLAG_GATEWAY_MODE = "gateway-mode"
FLAG_GATEWAY_NAMESPACE = "gateway-namespace"
FLAG_GATEWAY_NAME = "gateway-name"
FLAG_GATEWAY_CLASS = "gateway-class"

PROVIDER_FLAGS: dict[str, str] = {
    FLAG_GATEWAY_MODE: "Gateway topology: 'centralized' or 'per-namespace'",
    FLAG_GATEWAY_NAMESPACE: "Namespace of the shared Gateway in centralized mode",
    FLAG_GATEWAY_NAME: "Name of the shared Gateway in centralized mode",
    FLAG_GATEWAY_CLASS: "GatewayClass of the per-namespace Gateways",
}


class GatewayMode(str, Enum):
    """Where converted routes attach."""

    CENTRALIZED = "centralized"
    PER_NAMESPACE = "per-namespace"

    @classmethod
    def parse(cls, value: str) -> GatewayMode:
        normalized = value.strip().lower()
        if normalized == "per-tenant":
            return cls.PER_NAMESPACE
        try:
            return cls(normalized)
        except ValueError:
            raise ConfigurationError(
                f"Invalid gateway mode '{value}'",
                field_name=FLAG_GATEWAY_MODE,
                expected=", ".join(m.value for m in cls),
                actual_value=value,
            ) from None


class GatewayConfig(BaseModel):
    """Topology settings shared by the materializer and the topology transform."""

    mode: GatewayMode = GatewayMode.CENTRALIZED
    namespace: str = Field(DEFAULT_GATEWAY_NAMESPACE, min_length=1)
    name: str = Field(DEFAULT_GATEWAY_NAME, min_length=1)
    gateway_class_name: str = Field(DEFAULT_GATEWAY_CLASS, min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("namespace", "name", "gateway_class_name")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @property
    def is_centralized(self) -> bool:
        return self.mode == GatewayMode.CENTRALIZED

    def gateway_ref(self, route_namespace: str) -> NamespacedName:
        """The Gateway a route in ``route_namespace`` attaches to."""
        if self.is_centralized:
            return NamespacedName(self.namespace, self.name)
        tenant = f"{route_namespace}-gateway"
        return NamespacedName(tenant, tenant)

    def filter_namespace(self, route_namespace: str) -> str:
        """Namespace that receives extension objects for a route."""
        if self.is_centralized:
            return self.namespace
        return route_namespace

    @classmethod
    def from_flags(cls, flags: dict[str, str]) -> GatewayConfig:
        """Build from provider-specific flags; empty values keep the defaults."""
        unknown = sorted(set(flags) - set(PROVIDER_FLAGS))
        if unknown:
            raise ConfigurationError(
                f"Unknown provider flag(s): {', '.join(unknown)}",
                field_name="provider_flags",
                expected=", ".join(sorted(PROVIDER_FLAGS)),
            )
        values: dict[str, object] = {}
        if flags.get(FLAG_GATEWAY_MODE):
            values["mode"] = GatewayMode.parse(flags[FLAG_GATEWAY_MODE])
        if flags.get(FLAG_GATEWAY_NAMESPACE):
            values["namespace"] = flags[FLAG_GATEWAY_NAMESPACE]
        if flags.get(FLAG_GATEWAY_NAME):
            values["name"] = flags[FLAG_GATEWAY_NAME]
        if flags.get(FLAG_GATEWAY_CLASS):
            values["gateway_class_name"] = flags[FLAG_GATEWAY_CLASS]
        return cls(**values)
