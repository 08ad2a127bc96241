from __future__ import annotations

import pytest

from ingress2gateway.core.validation import FieldErrorType
from ingress2gateway.models.kubernetes import NamespacedName
from ingress2gateway.plugins.ingress_nginx.features.external_auth import (
    ExternalAuthFeature,
    split_headers,
)

ROUTE = NamespacedName("default", "web-example-com")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, []),
        ("", []),
        ("X-User", ["X-User"]),
        ("X-User, X-Email ,,X-Groups", ["X-User", "X-Email", "X-Groups"]),
    ],
)
def test_split_headers(raw, expected) -> None:
    assert split_headers(raw) == expected


class TestExternalAuthFeature:
    def test_full_configuration(self, make_ingress, lower) -> None:
        ing = make_ingress(
            annotations={
                "auth-url": "http://auth.security.svc.cluster.local:8080/verify",
                "auth-method": "post",
                "auth-signin": "https://login.example.com",
                "auth-response-headers": "X-User, X-Email",
                "auth-cache-key": "$remote_user",
                "auth-cache-duration": "200 202 401 5m",
            }
        )
        context, ir = lower(ing)

        errors = ExternalAuthFeature().apply(context, ir)

        config = ir.http_routes[ROUTE].provider_specific.ingress_nginx.external_auth
        assert errors == []
        assert config.url == "http://auth.security.svc.cluster.local:8080/verify"
        assert config.method == "POST"
        assert config.signin_url == "https://login.example.com"
        assert config.response_headers == ["X-User", "X-Email"]
        assert config.cache_key == "$remote_user"
        assert config.cache_duration == "200 202 401 5m"

    def test_defaults(self, make_ingress, lower) -> None:
        ing = make_ingress(annotations={"auth-url": "http://auth/verify"})
        context, ir = lower(ing)

        ExternalAuthFeature().apply(context, ir)

        config = ir.http_routes[ROUTE].provider_specific.ingress_nginx.external_auth
        assert config.method == "GET"
        assert config.response_headers == []
        assert config.signin_url is None

    def test_companions_without_url_ignored(self, make_ingress, lower) -> None:
        context, ir = lower(make_ingress(annotations={"auth-method": "POST"}))

        ExternalAuthFeature().apply(context, ir)

        assert ir.http_routes[ROUTE].provider_specific.ingress_nginx is None

    def test_empty_url_is_required_error(self, make_ingress, lower) -> None:
        context, ir = lower(make_ingress(annotations={"auth-url": "  "}))

        errors = ExternalAuthFeature().apply(context, ir)

        assert [e.type for e in errors] == [FieldErrorType.REQUIRED]
        assert ir.http_routes[ROUTE].provider_specific.ingress_nginx is None
