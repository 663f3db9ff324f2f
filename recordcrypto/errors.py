"""
recordcrypto Error Taxonomy

Structural and usage errors raise immediately. A signature that simply
does not match is never an error: verification reports it as False.
"""


class CryptoError(Exception):
    """Base class for all recordcrypto errors."""
    pass


class NotInitialized(CryptoError):
    """An operation was invoked before initialize() completed."""
    pass


class InvalidArgument(CryptoError, ValueError):
    """A parameter has the wrong shape or type."""
    pass


class InvalidInputKind(InvalidArgument):
    """A value that is not a record was passed where a record is expected."""
    pass


class InvalidKeyFormat(CryptoError, ValueError):
    """Key material has the wrong length or encoding."""
    pass


class InvalidSignatureFormat(CryptoError, ValueError):
    """A signature is not hex or is too short to contain a signature."""
    pass


class MissingRequiredField(CryptoError, KeyError):
    """A record lacks a reserved field the caller asked to exclude or check."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return Exception.__str__(self)


class MissingSignature(CryptoError):
    """A record has no well-formed signature envelope."""
    pass
