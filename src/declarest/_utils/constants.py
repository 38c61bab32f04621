# Environment variables
ENV_BASE_URL = "DECLAREST_BASE_URL"

# Logging
LOGGER_NAME = "declarest"

# Tracing span attributes
SPAN_ATTR_HTTP_METHOD = "http.request.method"
SPAN_ATTR_URL = "url.full"
SPAN_ATTR_STATUS_CODE = "http.response.status_code"

# Characters encodeURIComponent leaves untouched besides alphanumerics
URI_COMPONENT_SAFE = "-_.!~*'()"
