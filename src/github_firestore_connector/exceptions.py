"""Exception hierarchy for the connector.

Every error raised by the connector derives from ``ConnectorError`` and
carries a short ``error_code`` plus a ``retryable`` hint for whatever caller
decides to retry.
"""


class ConnectorError(Exception):
    """Base class for connector errors."""

    error_code = "CONNECTOR_ERROR"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(ConnectorError, ValueError):
    """A required argument was missing (None) or malformed."""

    error_code = "INVALID_ARGUMENT"


class PipelineNotFoundError(ConnectorError):
    """No registered pipeline can handle the requested type pair."""

    error_code = "PIPELINE_NOT_FOUND"


class ConnectorNotFoundError(ConnectorError):
    """No output connector is registered for the requested type."""

    error_code = "CONNECTOR_NOT_FOUND"


class OutputError(ConnectorError):
    """Writing to an output connector failed."""

    error_code = "OUTPUT_ERROR"
    retryable = True


class ConfigError(ConnectorError):
    """Configuration is missing or invalid."""

    error_code = "CONFIG_ERROR"
