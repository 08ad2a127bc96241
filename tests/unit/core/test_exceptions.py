from __future__ import annotations

from ingress2gateway.core.exceptions import (
    ConfigurationError,
    Ingress2GatewayError,
    ManifestLoadError,
    ProviderError,
)


class TestIngress2GatewayError:
    def test_str_includes_code_and_context(self) -> None:
        error = Ingress2GatewayError("boom", "SOME_CODE", {"a": 1})

        assert "boom" in str(error)
        assert "a=1" in str(error)
        assert error.error_code == "SOME_CODE"

    def test_hierarchy(self) -> None:
        for error in (
            ManifestLoadError("x"),
            ConfigurationError("x"),
            ProviderError("x"),
        ):
            assert isinstance(error, Ingress2GatewayError)


class TestRecoveryHints:
    def test_manifest_hint_mentions_document(self) -> None:
        error = ManifestLoadError("bad", file_path="in.yaml", document_index=3)

        assert error.error_code == "MANIFEST_LOAD_ERROR"
        assert "#3" in error.get_recovery_hint()

    def test_manifest_hint_without_document(self) -> None:
        assert "valid YAML" in ManifestLoadError("bad").get_recovery_hint()

    def test_configuration_hint_lists_expected(self) -> None:
        error = ConfigurationError(
            "bad mode", field_name="gateway-mode", expected="a, b", actual_value="c"
        )

        assert error.get_recovery_hint() == "Set 'gateway-mode' to one of: a, b"
        assert error.context["actual_value"] == "c"

    def test_provider_error_context(self) -> None:
        error = ProviderError("nope", provider_name="p", phase="create")

        assert error.error_code == "PROVIDER_ERROR"
        assert error.context == {"provider_name": "p", "phase": "create"}
