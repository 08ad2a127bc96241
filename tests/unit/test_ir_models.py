import pytest
from pydantic import ValidationError

from ingress2gateway.ir.models import (
    IR,
    BackendProtocol,
    BodySize,
    ClientCertAuthConfig,
    ClientCertVerifyMode,
    ExternalAuthConfig,
    HTTPRouteContext,
    IngressNginxRouteIR,
    ServiceContext,
)
from ingress2gateway.models.gateway_api import HTTPRoute, ObjectMeta


class TestBackendProtocol:
    @pytest.mark.parametrize(
        "protocol, expected",
        [
            (BackendProtocol.HTTPS, True),
            (BackendProtocol.GRPCS, True),
            (BackendProtocol.HTTP, False),
            (BackendProtocol.GRPC, False),
            (BackendProtocol.FCGI, False),
        ],
    )
    def test_is_tls(self, protocol: BackendProtocol, expected: bool) -> None:
        assert protocol.is_tls is expected


class TestBodySize:
    def test_unlimited(self) -> None:
        assert BodySize(raw="0", bytes=0).unlimited
        assert not BodySize(raw="1k", bytes=1024).unlimited

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BodySize(raw="-5", bytes=-5)


class TestClientCertAuthConfig:
    def test_defaults(self) -> None:
        config = ClientCertAuthConfig(secret="ns/ca")

        assert config.verify_client is ClientCertVerifyMode.REQUIRED
        assert config.verify_depth == 1
        assert config.pass_certificate_to_upstream is False

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValidationError, match="secret must not be empty"):
            ClientCertAuthConfig(secret="")

    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClientCertAuthConfig(secret="ca", verify_depth=-1)

    def test_mode_from_nginx_value(self) -> None:
        config = ClientCertAuthConfig(secret="ca", verify_client="optional_no_ca")

        assert config.verify_client is ClientCertVerifyMode.OPTIONAL_NO_CA


class TestExternalAuthConfig:
    def test_method_uppercased(self) -> None:
        assert ExternalAuthConfig(url="http://a", method="post").method == "POST"

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExternalAuthConfig(url="")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExternalAuthConfig(url="http://a", timeout="5s")


class TestIngressNginxRouteIR:
    def test_has_rate_limit(self) -> None:
        assert IngressNginxRouteIR(rate_limit_rps=5).has_rate_limit
        assert not IngressNginxRouteIR(rate_limit_rps=0).has_rate_limit
        assert not IngressNginxRouteIR().has_rate_limit

    def test_buffering_disabled_only_when_off(self) -> None:
        assert IngressNginxRouteIR(proxy_buffering=False).buffering_disabled
        assert not IngressNginxRouteIR(proxy_buffering=True).buffering_disabled
        assert not IngressNginxRouteIR().buffering_disabled


class TestContexts:
    def test_route_extension_allocated_lazily(self) -> None:
        ctx = HTTPRouteContext(
            http_route=HTTPRoute(metadata=ObjectMeta(name="web", namespace="shop"))
        )

        assert ctx.provider_specific.ingress_nginx is None
        ext = ctx.ingress_nginx()
        assert ctx.ingress_nginx() is ext

    def test_service_extension_allocated_lazily(self) -> None:
        ctx = ServiceContext(ports={"http": 80})

        ctx.ingress_nginx().backend_protocol = BackendProtocol.HTTPS

        assert ctx.provider_specific.ingress_nginx.backend_protocol.is_tls

    def test_empty_ir(self) -> None:
        ir = IR()

        assert ir.gateways == {}
        assert ir.http_routes == {}
        assert ir.services == {}
        assert ir.backend_tls_policies == {}
        assert ir.reference_grants == {}
