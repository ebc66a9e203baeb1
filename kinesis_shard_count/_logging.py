import hashlib
import logging

# Create the library logger
logger = logging.getLogger("kinesis_shard_count")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def redact_token(token: str | None) -> str | None:
    """
    Redacts a continuation token for logging.
    Hashes the value to allow correlation between pages without logging the cursor itself.
    """
    if not token:
        return None
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:8]
