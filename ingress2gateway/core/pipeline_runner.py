"""Pipeline runner driving one provider from manifest to emitted resources."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..io.manifest_writer import ManifestWriter
from ..models.gateway_api import GatewayResources
from .exceptions import Ingress2GatewayError
from .notifications import Notification, NotificationCollector, Severity
from .provider_registry import ProviderConfig, ProviderRegistry
from .validation import FieldError

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    resources: GatewayResources
    errors: list[FieldError] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    output_file: Path | None = None

    @property
    def blockers(self) -> list[Notification]:
        return [n for n in self.notifications if n.severity == Severity.BLOCKER]


class PipelineRunner:
    """
    Coordinates read, IR construction and emission for a single provider.

    A new provider and notification collector are created for every
    execution, so nothing carries over between runs.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        config: ProviderConfig | None = None,
        writer: ManifestWriter | None = None,
    ):
        """
        Initialize the pipeline runner.

        Args:
            registry: Registry used to build the provider
            config: Options passed to the provider factory
            writer: Writer used when an output file is requested
        """
        self._logger = logger.getChild(self.__class__.__name__)
        self._registry = registry
        self._config = config or ProviderConfig()
        self._writer = writer or ManifestWriter()

    def execute(
        self,
        provider_name: str,
        input_file: Path,
        output_file: Path | None = None,
    ) -> ConversionResult:
        """
        Convert one manifest file.

        Args:
            provider_name: Registered provider to use
            input_file: Manifest holding the source objects
            output_file: Optional path for the emitted YAML

        Returns:
            The emitted resources with every error and notification

        Raises:
            Ingress2GatewayError: For unreadable input or bad configuration
            RuntimeError: If the conversion fails unexpectedly
        """
        self._logger.info(f"Starting conversion with provider '{provider_name}'")
        collector = NotificationCollector()

        try:
            provider = self._registry.create_provider(
                provider_name, self._config, collector
            )
            provider.read_resources_from_file(Path(input_file))
            ir, errors = provider.to_ir()
            resources, emit_errors = provider.to_gateway_resources(ir)
            errors.extend(emit_errors)

            result = ConversionResult(
                resources=resources,
                errors=errors,
                notifications=collector.notifications,
            )

            if output_file:
                result.output_file = self._writer.save(resources, output_file)
                self._logger.info(f"Pipeline output saved to: {output_file}")

            self._logger.info("Conversion completed successfully")
            return result

        except (Ingress2GatewayError, OSError):
            raise
        except Exception as e:
            self._logger.error(f"Conversion failed: {e}")
            raise RuntimeError(f"Conversion failed: {e}") from e
