"""ingress-nginx provider: annotations to Gateway API and Istio EnvoyFilters."""

from .config import GatewayConfig, GatewayMode
from .provider import PROVIDER_NAME, IngressNginxProvider
from .reader import IngressNginxReader

__all__ = [
    "GatewayConfig",
    "GatewayMode",
    "IngressNginxProvider",
    "IngressNginxReader",
    "PROVIDER_NAME",
]
