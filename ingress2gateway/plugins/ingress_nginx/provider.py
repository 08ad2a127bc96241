import logging
from pathlib import Path

from ...core.common.base_feature import BaseFeatureRunner
from ...core.common.route_resolver import (
    get_rule_groups,
    ingresses_to_ir,
    ir_to_gateway_resources,
)
from ...core.notifications import NotificationCollector
from ...core.protocols import FeatureRunner, ManifestReader, NotificationSink
from ...core.provider_registry import ProviderConfig
from ...core.storage import ProviderStorage
from ...core.validation import FieldError
from ...ir.models import IR
from ...models.gateway_api import GatewayResources
from .config import DEFAULT_INGRESS_CLASS, GatewayConfig
from .context import FeatureContext
from .features.backend_protocol import BackendProtocolFeature
from .features.blockers import BlockerDetectionFeature
from .features.client_cert_auth import ClientCertAuthFeature
from .features.external_auth import ExternalAuthFeature
from .features.filter_chain_notice import FilterChainNoticeFeature
from .features.proxy_settings import ProxySettingsFeature
from .features.rate_limit import RateLimitFeature
from .features.ssl_redirect import SSLRedirectFeature
from .features.timeout import TimeoutFeature
from .reader import IngressNginxReader
from .resources.materializer import ResourceMaterializer
from .topology import TopologyTransform

logger = logging.getLogger(__name__)

PROVIDER_NAME = "ingress-nginx"


class IngressNginxProvider:
    """
    Provider for ingress-nginx.

    Connects the manifest reader, the generic route lowering, the feature
    passes, the resource materializer and the topology transform.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        notifier: NotificationSink | None = None,
    ):
        self._logger = logger.getChild(self.__class__.__name__)
        config = config or ProviderConfig()
        self._gateway_config = GatewayConfig.from_flags(config.flags_for(PROVIDER_NAME))
        self._ingress_class = config.ingress_class or DEFAULT_INGRESS_CLASS
        self._notifier = notifier or NotificationCollector()
        self._reader: ManifestReader = IngressNginxReader(self._ingress_class)
        self._storage = ProviderStorage()

        self._features = BaseFeatureRunner()
        self._register_features()

    @property
    def gateway_config(self) -> GatewayConfig:
        return self._gateway_config

    @property
    def notifier(self) -> NotificationSink:
        return self._notifier

    @property
    def storage(self) -> ProviderStorage:
        return self._storage

    def get_feature_runner(self) -> FeatureRunner:
        return self._features

    def _register_features(self):
        """Register the feature passes; registration order is execution order."""
        self._logger.info("Registering ingress-nginx feature passes...")

        # Blockers first so they are reported even if a later pass fails
        self._features.register_feature(BlockerDetectionFeature())
        self._features.register_feature(BackendProtocolFeature())
        self._features.register_feature(TimeoutFeature())
        self._features.register_feature(SSLRedirectFeature())
        self._features.register_feature(RateLimitFeature())
        self._features.register_feature(ProxySettingsFeature())
        self._features.register_feature(ClientCertAuthFeature())
        self._features.register_feature(ExternalAuthFeature())
        self._features.register_feature(FilterChainNoticeFeature())

    def read_resources_from_file(self, file_path: Path) -> None:
        self._storage = self._reader.read_from_file(Path(file_path))

    def load_storage(self, storage: ProviderStorage) -> None:
        self._storage = storage

    def to_ir(self) -> tuple[IR, list[FieldError]]:
        """Lower the stored Ingresses and run every feature pass."""
        ingresses = self._storage.ingresses
        service_ports = self._storage.service_ports()

        ir, errors = ingresses_to_ir(ingresses, service_ports)
        context = FeatureContext(
            ingresses=ingresses,
            service_ports=service_ports,
            rule_groups=get_rule_groups(ingresses),
            notifier=self._notifier,
        )
        errors.extend(self._features.run(context, ir))

        self._logger.info(
            f"Built IR with {len(ir.http_routes)} HTTPRoutes and "
            f"{len(ir.backend_tls_policies)} BackendTLSPolicies "
            f"({len(errors)} errors)"
        )
        return ir, errors

    def to_gateway_resources(
        self, ir: IR
    ) -> tuple[GatewayResources, list[FieldError]]:
        """Emit target objects and apply the configured Gateway topology."""
        resources = ir_to_gateway_resources(ir)
        ResourceMaterializer(self._gateway_config, self._notifier).materialize(
            ir, resources
        )
        TopologyTransform(self._gateway_config).apply(resources)
        return resources, []
