from __future__ import annotations

from ingress2gateway.core.validation import (
    FieldErrorType,
    FieldPath,
    invalid,
    not_supported,
    required,
)


class TestFieldPath:
    def test_render(self) -> None:
        path = FieldPath.of("ingress", "default", "web").child("metadata")

        assert str(path) == "ingress.default.web.metadata"

    def test_key_attaches_to_last_segment(self) -> None:
        path = FieldPath.of("metadata", "annotations").key("a/b")

        assert str(path) == "metadata.annotations[a/b]"

    def test_key_on_empty_path(self) -> None:
        assert str(FieldPath().key("x")) == "[x]"

    def test_immutable_children(self) -> None:
        base = FieldPath.of("spec")

        base.child("rules")

        assert str(base) == "spec"


class TestFactories:
    def test_invalid(self) -> None:
        error = invalid(FieldPath.of("spec", "port"), "abc", "must be an integer")

        assert error.type is FieldErrorType.INVALID
        assert str(error) == "spec.port: FieldValueInvalid: 'abc': must be an integer"

    def test_not_supported_lists_choices(self) -> None:
        error = not_supported(FieldPath.of("mode"), "x", ["on", "off"])

        assert error.type is FieldErrorType.NOT_SUPPORTED
        assert error.message == 'supported values: "on", "off"'

    def test_required_has_no_value(self) -> None:
        error = required(FieldPath.of("url"), "must be set")

        assert error.value is None
        assert str(error) == "url: FieldValueRequired: must be set"
