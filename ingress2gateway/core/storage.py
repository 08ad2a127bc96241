"""Source objects held by a provider between reading and conversion."""

from dataclasses import dataclass, field

from ..models.kubernetes import Ingress, NamespacedName, Service


@dataclass
class ProviderStorage:
    ingresses: list[Ingress] = field(default_factory=list)
    services: dict[NamespacedName, Service] = field(default_factory=dict)

    def service_ports(self) -> dict[NamespacedName, dict[str, int]]:
        """Lookup from service to its exposed ports, by name and number."""
        return {key: svc.port_lookup() for key, svc in self.services.items()}
