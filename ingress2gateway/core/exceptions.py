"""
ingress2gateway exception classes.

Raised for conditions that stop a run (unreadable manifests, bad
configuration, unknown providers). Per-annotation problems are reported as
:class:`~ingress2gateway.core.validation.FieldError` values instead.
"""

from typing import Any


class Ingress2GatewayError(Exception):
    """Base exception for all ingress2gateway errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg = f"{base_msg} (Context: {context_str})"
        return base_msg


class ManifestLoadError(Ingress2GatewayError):
    """Raised when a manifest file cannot be read or decoded."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        document_index: int | None = None,
    ) -> None:
        context: dict[str, Any] = {}
        if file_path:
            context["file_path"] = file_path
        if document_index is not None:
            context["document_index"] = document_index
        super().__init__(message, "MANIFEST_LOAD_ERROR", context)

    def get_recovery_hint(self) -> str:
        if "document_index" in self.context:
            return (
                f"Check YAML document #{self.context['document_index']} "
                "for a malformed Ingress or Service"
            )
        return "Ensure the file exists and contains valid YAML or JSON manifests"


class ConfigurationError(Ingress2GatewayError):
    """Raised when provider or gateway configuration is invalid."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        expected: str | None = None,
        actual_value: Any = None,
    ) -> None:
        context: dict[str, Any] = {}
        if field_name:
            context["field_name"] = field_name
        if expected:
            context["expected"] = expected
        if actual_value is not None:
            context["actual_value"] = actual_value
        super().__init__(message, "CONFIGURATION_ERROR", context)

    def get_recovery_hint(self) -> str:
        if "field_name" in self.context and "expected" in self.context:
            return (
                f"Set '{self.context['field_name']}' to one of: "
                f"{self.context['expected']}"
            )
        return "Check the command-line flags and provider configuration"


class ProviderError(Ingress2GatewayError):
    """Raised when a provider cannot be found or fails to convert."""

    def __init__(
        self,
        message: str,
        provider_name: str | None = None,
        phase: str | None = None,
    ) -> None:
        context: dict[str, Any] = {}
        if provider_name:
            context["provider_name"] = provider_name
        if phase:
            context["phase"] = phase
        super().__init__(message, "PROVIDER_ERROR", context)
