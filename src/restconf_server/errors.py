"""
=============================================================================
RESTCONF EXCEPTION HIERARCHY
=============================================================================

Shared by the dispatcher, the resource encoders and the server so every
module raises and catches the same types.

    RestconfError
    ├── ConfigurationError ........ bad settings or route table (startup)
    │   └── DuplicateRouteError ... same path registered twice
    └── EncodingError ............. a representation failed to serialize

Configuration errors stop the process before it listens: the CLI logs
them and exits with status 1. EncodingError never leaves a handler; it is
turned into a 417 "Marshal failed!" response.

=============================================================================
"""


class RestconfError(Exception):
    """Base for all RESTCONF server errors."""


class ConfigurationError(RestconfError):
    """
    Raised when server configuration is invalid.

    Typically raised while the server is being constructed: by
    ServerConfig.validate(), or by the Dispatcher when a route is
    registered twice or after the table was frozen.
    """


class DuplicateRouteError(ConfigurationError):
    """A handler is already registered for this path."""

    def __init__(self, path: str):
        super().__init__(f"handler for {path!r} already registered")
        self.path = path


class EncodingError(RestconfError):
    """
    A resource representation could not be serialized.

    Wraps the underlying TypeError/ValueError from json or ElementTree;
    str() of this error is what follows "Marshal failed! " in the 417 body.
    """

    def __init__(self, media_type: str, cause: Exception):
        super().__init__(str(cause))
        self.media_type = media_type
        self.cause = cause
