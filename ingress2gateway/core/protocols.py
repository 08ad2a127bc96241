from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..ir.models import IR
    from ..models.gateway_api import GatewayResources
    from ..models.kubernetes import NamespacedName
    from .notifications import Severity
    from .storage import ProviderStorage
    from .validation import FieldError


class NotificationSink(Protocol):
    """Receives diagnostics for human review."""

    def emit(
        self,
        severity: "Severity",
        message: str,
        source: "NamespacedName | None" = None,
    ) -> None: ...


class ManifestReader(Protocol):
    """Defines the contract for reading provider source objects."""

    def can_read(self, file_path: Path) -> bool:
        """
        Checks whether this reader can handle the given file.

        Args:
            file_path: Path to the manifest file

        Returns:
            True if the extension is supported, False otherwise
        """
        ...

    def read_from_file(self, file_path: Path) -> "ProviderStorage":
        """Reads every relevant object of a manifest file."""
        ...


class FeaturePass(Protocol):
    """Defines the contract for one annotation-driven enrichment of the IR."""

    name: str

    def apply(self, context: Any, ir: "IR") -> "list[FieldError]":
        """
        Enrich the IR in place from the source objects in the context.

        Args:
            context: Provider context carrying source objects, the service
                     ports lookup, route groupings and the notification sink
            ir: The IR to enrich

        Returns:
            Every parse or validation error found; never raises for bad input.
        """
        ...


class FeatureRunner(Protocol):
    """Defines the contract for running an ordered set of feature passes."""

    def register_feature(self, feature: FeaturePass) -> None: ...

    def get_registered_features(self) -> list[FeaturePass]: ...

    def run(self, context: Any, ir: "IR") -> "list[FieldError]": ...


class Provider(Protocol):
    """Defines the contract a conversion provider fulfils."""

    def read_resources_from_file(self, file_path: Path) -> None:
        """Read and keep the provider's source objects."""
        ...

    def to_ir(self) -> "tuple[IR, list[FieldError]]":
        """Convert the stored source objects into an enriched IR."""
        ...

    def to_gateway_resources(
        self, ir: "IR"
    ) -> "tuple[GatewayResources, list[FieldError]]":
        """Emit the final target resources for an IR."""
        ...
