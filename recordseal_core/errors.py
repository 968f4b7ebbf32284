# recordseal_core/errors.py


class RecordSealError(Exception):
    pass


class InvalidInput(RecordSealError, ValueError):
    """Malformed arguments. A caller bug, never retryable."""


class KeyUnavailable(RecordSealError):
    """Key material needed for the operation is missing."""


class KeyNotInitialized(KeyUnavailable):
    """KeyManager.generate() has not run yet."""


class MalformedPayload(RecordSealError):
    """Bytes handed to the codec are truncated, corrupt or off-schema."""


class RecordNotFound(RecordSealError, LookupError):
    pass


class DuplicateIdentifier(InvalidInput):
    pass
