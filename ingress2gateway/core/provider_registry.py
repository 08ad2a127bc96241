"""Explicit registry of conversion providers."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .exceptions import Ingress2GatewayError, ProviderError
from .protocols import NotificationSink, Provider

logger = logging.getLogger(__name__)


@dataclass
class ProviderConfig:
    """Options handed to a provider factory."""

    ingress_class: str | None = None
    provider_specific_flags: dict[str, dict[str, str]] = field(default_factory=dict)

    def flags_for(self, provider_name: str) -> dict[str, str]:
        return dict(self.provider_specific_flags.get(provider_name, {}))


ProviderFactory = Callable[[ProviderConfig, NotificationSink], Provider]


@dataclass
class _Registration:
    factory: ProviderFactory
    description: str
    flags: dict[str, str]


class ProviderRegistry:
    """
    Maps provider names to factories.

    The host application builds the registry (usually through
    :func:`build_default_registry`) and passes it where it is needed;
    nothing is registered at import time.
    """

    def __init__(self):
        self._providers: dict[str, _Registration] = {}
        self._logger = logger.getChild(self.__class__.__name__)

    def register_provider(
        self,
        name: str,
        factory: ProviderFactory,
        description: str = "",
        flags: dict[str, str] | None = None,
    ) -> None:
        """
        Register a provider factory under a name.

        Args:
            name: Provider identifier (e.g. 'ingress-nginx')
            factory: Callable building a provider from a ProviderConfig
                     and a notification sink
            description: One-line summary shown by the CLI
            flags: Provider-specific flag names mapped to their help text

        Raises:
            ValueError: If the name is empty or the factory is missing
        """
        if not name or not name.strip():
            raise ValueError("Provider name cannot be empty")
        if factory is None:
            raise ValueError("Provider factory cannot be None")

        name = name.strip().lower()
        if name in self._providers:
            self._logger.warning(
                f"Overwriting existing provider registration for '{name}'"
            )

        self._providers[name] = _Registration(factory, description, dict(flags or {}))
        self._logger.debug(f"Registered provider '{name}'")

    def create_provider(
        self, name: str, config: ProviderConfig, notifier: NotificationSink
    ) -> Provider:
        """
        Build a fresh provider instance reporting to ``notifier``.

        Raises:
            ProviderError: If the name is unknown or the factory fails
        """
        registration = self._get(name)
        try:
            return registration.factory(config, notifier)
        except Ingress2GatewayError:
            raise
        except Exception as e:
            raise ProviderError(
                f"Failed to create provider: {e}", provider_name=name, phase="create"
            ) from e

    def get_available_providers(self) -> list[str]:
        return sorted(self._providers)

    def get_description(self, name: str) -> str:
        return self._get(name).description

    def get_flags(self, name: str) -> dict[str, str]:
        return dict(self._get(name).flags)

    def _get(self, name: str) -> _Registration:
        key = (name or "").strip().lower()
        if key not in self._providers:
            available = ", ".join(self.get_available_providers()) or "none"
            raise ProviderError(
                f"Unknown provider '{name}'. Available providers: {available}",
                provider_name=name,
            )
        return self._providers[key]

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: str) -> bool:
        return bool(name) and name.strip().lower() in self._providers


def build_default_registry() -> ProviderRegistry:
    """Registry holding every built-in provider."""
    from ..plugins.ingress_nginx.config import PROVIDER_FLAGS
    from ..plugins.ingress_nginx.provider import PROVIDER_NAME, IngressNginxProvider

    registry = ProviderRegistry()
    registry.register_provider(
        PROVIDER_NAME,
        IngressNginxProvider,
        description="Convert ingress-nginx Ingresses to Gateway API and Istio",
        flags=PROVIDER_FLAGS,
    )
    return registry
