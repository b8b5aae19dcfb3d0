"""Timeout constants - no more magic numbers!"""

# Network timeouts
DEFAULT_HTTP_CONNECT_TIMEOUT = 10.0
DEFAULT_HTTP_REQUEST_TIMEOUT = 120.0

# Upper bound on a single agent round-trip, tool execution included
DEFAULT_RESPONSE_TIMEOUT = 300.0

__all__ = [
    "DEFAULT_HTTP_CONNECT_TIMEOUT",
    "DEFAULT_HTTP_REQUEST_TIMEOUT",
    "DEFAULT_RESPONSE_TIMEOUT",
]
