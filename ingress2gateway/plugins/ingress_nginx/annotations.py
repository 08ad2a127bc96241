"""ingress-nginx annotation keys understood by the provider."""

PREFIX = "nginx.ingress.kubernetes.io/"

# Backend protocol and upstream TLS
BACKEND_PROTOCOL = PREFIX + "backend-protocol"
PROXY_SSL_SECRET = PREFIX + "proxy-ssl-secret"
PROXY_SSL_VERIFY = PREFIX + "proxy-ssl-verify"
PROXY_SSL_NAME = PREFIX + "proxy-ssl-name"
PROXY_SSL_PROTOCOLS = PREFIX + "proxy-ssl-protocols"
PROXY_SSL_CIPHERS = PREFIX + "proxy-ssl-ciphers"

# Timeouts
PROXY_CONNECT_TIMEOUT = PREFIX + "proxy-connect-timeout"
PROXY_READ_TIMEOUT = PREFIX + "proxy-read-timeout"
PROXY_SEND_TIMEOUT = PREFIX + "proxy-send-timeout"

# Proxy settings
PROXY_BODY_SIZE = PREFIX + "proxy-body-size"
PROXY_BUFFERING = PREFIX + "proxy-buffering"
PROXY_REQUEST_BUFFERING = PREFIX + "proxy-request-buffering"
LOAD_BALANCE = PREFIX + "load-balance"

# Redirects
SSL_REDIRECT = PREFIX + "ssl-redirect"
FORCE_SSL_REDIRECT = PREFIX + "force-ssl-redirect"

# Rate limiting
LIMIT_RPS = PREFIX + "limit-rps"
LIMIT_RPM = PREFIX + "limit-rpm"
LIMIT_CONNECTIONS = PREFIX + "limit-connections"
LIMIT_BURST_MULTIPLIER = PREFIX + "limit-burst-multiplier"
LIMIT_REQ_ZONE = PREFIX + "limit-req-zone"

# Client certificate auth
AUTH_TLS_SECRET = PREFIX + "auth-tls-secret"
AUTH_TLS_VERIFY_CLIENT = PREFIX + "auth-tls-verify-client"
AUTH_TLS_VERIFY_DEPTH = PREFIX + "auth-tls-verify-depth"
AUTH_TLS_ERROR_PAGE = PREFIX + "auth-tls-error-page"
AUTH_TLS_PASS_CERTIFICATE_TO_UPSTREAM = PREFIX + "auth-tls-pass-certificate-to-upstream"

# External auth
AUTH_URL = PREFIX + "auth-url"
AUTH_METHOD = PREFIX + "auth-method"
AUTH_SIGNIN = PREFIX + "auth-signin"
AUTH_RESPONSE_HEADERS = PREFIX + "auth-response-headers"
AUTH_REQUEST_REDIRECT = PREFIX + "auth-request-redirect"
AUTH_CACHE_KEY = PREFIX + "auth-cache-key"
AUTH_CACHE_DURATION = PREFIX + "auth-cache-duration"
AUTH_SNIPPET = PREFIX + "auth-snippet"

# Free-form configuration with no Gateway API equivalent
SERVER_SNIPPET = PREFIX + "server-snippet"
CONFIGURATION_SNIPPET = PREFIX + "configuration-snippet"
STREAM_SNIPPET = PREFIX + "stream-snippet"
USE_REGEX = PREFIX + "use-regex"
REWRITE_TARGET = PREFIX + "rewrite-target"
