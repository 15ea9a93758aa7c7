class SubtrackError(Exception):
    """Base exception for the Subtrack backend."""

    pass


class MethodNotAllowed(SubtrackError):
    """Raised when the payment callback is invoked with anything but POST."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Method '{method}' not allowed")


class ConfigurationError(SubtrackError):
    """Raised when a required secret or credential is missing."""

    pass


class VerificationError(SubtrackError):
    """Raised when a callback signature is missing, wrong, or stale.

    The message is for logs only and must not be echoed to the caller.
    """

    pass


class ParseError(SubtrackError):
    """Raised when a verified payload does not match the expected event schema."""

    pass


class IdentificationError(SubtrackError):
    """Raised when an actionable event carries no usable account reference."""

    pass


class NoAccountMatched(SubtrackError):
    """Soft failure: the grant statement matched no account."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"No account matched {field}={value!r}")


class StorageError(SubtrackError):
    """Raised when the account store faults during an update."""

    pass
