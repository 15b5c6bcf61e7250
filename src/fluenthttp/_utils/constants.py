# Body formats
BODY_FORMAT_RAW = "body"
BODY_FORMAT_JSON = "json"
BODY_FORMAT_FORM = "form_params"
BODY_FORMAT_MULTIPART = "multipart"
BODY_FORMATS = (
    BODY_FORMAT_RAW,
    BODY_FORMAT_JSON,
    BODY_FORMAT_FORM,
    BODY_FORMAT_MULTIPART,
)

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"
CONTENT_TYPE_MULTIPART = "multipart/form-data"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"

# Auth schemes
AUTH_BASIC = "basic"
AUTH_DIGEST = "digest"
AUTH_NTLM = "ntlm"

# Environment variables
ENV_PREFIX = "FLUENTHTTP_"
ENV_BASE_URL = "FLUENTHTTP_BASE_URL"
ENV_TIMEOUT = "FLUENTHTTP_TIMEOUT"
ENV_CONNECT_TIMEOUT = "FLUENTHTTP_CONNECT_TIMEOUT"
ENV_DEBUG = "FLUENTHTTP_DEBUG"

LOGGER_NAME = "fluenthttp"
