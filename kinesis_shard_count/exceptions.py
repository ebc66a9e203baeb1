from collections.abc import Generator
from contextlib import contextmanager

from botocore.exceptions import BotoCoreError, ClientError

# The only upstream code that is recovered from rather than propagated.
STREAM_NOT_FOUND_CODE = "ResourceNotFoundException"

THROTTLING_CODES = (
    "LimitExceededException",
    "ThrottlingException",
    "ProvisionedThroughputExceededException",
)

INVALID_REQUEST_CODES = (
    "InvalidArgumentException",
    "ValidationException",
    "ExpiredNextTokenException",
)

ACCESS_DENIED_CODES = (
    "AccessDeniedException",
    "UnrecognizedClientException",
    "ExpiredTokenException",
)


class ShardCountError(Exception):
    """Base exception for all shard count errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(ShardCountError):
    """Raised when plugin options or the AWS configuration are unusable."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


class StreamNotFoundError(ShardCountError):
    """Raised when the Kinesis stream does not exist."""

    def __init__(self, stream_name: str, original_error: Exception | None = None) -> None:
        super().__init__(f"Stream '{stream_name}' not found", original_error)
        self.stream_name = stream_name


class ThrottlingError(ShardCountError):
    """Raised when Kinesis throttles the control plane request."""

    def __init__(
        self, message: str = "Request rate exceeded", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)


class InvalidRequestError(ShardCountError):
    """Raised when Kinesis rejects the request parameters or the continuation token."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


class AccessDeniedError(ShardCountError):
    """Raised when the credentials are missing, expired or lack kinesis:ListShards."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


class RequestCancelledError(ShardCountError):
    """Raised when the caller cancels a traversal."""

    def __init__(
        self, message: str = "Request cancelled", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)


class NoMorePagesError(ShardCountError):
    """Raised when a page is requested from an exhausted paginator."""

    def __init__(self, message: str = "No more pages available") -> None:
        super().__init__(message)


class StalledCursorError(ShardCountError):
    """Raised when the server hands back the continuation token it was just given."""

    def __init__(self, token_hash: str | None) -> None:
        super().__init__(f"The same next token was received twice (token {token_hash})")
        self.token_hash = token_hash


@contextmanager
def handle_kinesis_errors(
    stream_name: str | None = None, operation: str = "list shards"
) -> Generator[None, None, None]:
    """
    Context manager that catches botocore errors and raises the
    appropriate ShardCountError subclass.

    Classification only looks at the machine readable error code,
    never at the message text.

    Args:
        stream_name: Optional stream name for better error messages
        operation: Human readable name of the failed operation

    Usage:
        with handle_kinesis_errors(stream_name="events"):
            paginator.next_page()
    """
    context = f"failed to {operation}"
    if stream_name:
        context += f" for stream '{stream_name}'"

    try:
        yield
    except ShardCountError as e:
        # Already classified; only the operation and stream are added
        if not e.message.startswith(context):
            e.message = f"{context}: {e.message}"
            e.args = (e.message,)
        raise
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        error_message = e.response.get("Error", {}).get("Message", str(e))
        detail = f"{context}: ({error_code}) {error_message}"

        if error_code == STREAM_NOT_FOUND_CODE:
            raise StreamNotFoundError(stream_name=stream_name or "unknown", original_error=e) from e

        if error_code in THROTTLING_CODES:
            raise ThrottlingError(message=detail, original_error=e) from e

        if error_code in INVALID_REQUEST_CODES:
            raise InvalidRequestError(message=detail, original_error=e) from e

        if error_code in ACCESS_DENIED_CODES:
            raise AccessDeniedError(message=detail, original_error=e) from e

        # Unknown error: wrap in generic ShardCountError
        raise ShardCountError(message=detail, original_error=e) from e
    except BotoCoreError as e:
        # Endpoint, connection and credential resolution failures
        raise ShardCountError(message=f"{context}: {e}", original_error=e) from e
