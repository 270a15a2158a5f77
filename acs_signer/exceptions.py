"""
Custom exceptions for the ACS request signer.
"""


class SignerError(Exception):
    """Base exception for signer errors."""
    pass


class InvalidHeaderValueError(SignerError):
    """Raised when a header cannot be carried by the transport layer."""

    def __init__(self, header_name: str, reason: str = "contains characters not allowed in HTTP headers"):
        self.header_name = header_name
        super().__init__(f"Invalid value for header '{header_name}': {reason}")


class EncodingFailureError(SignerError):
    """Raised when request text cannot be encoded as UTF-8."""
    pass


class ConfigurationError(SignerError):
    """Raised when signer configuration is invalid."""
    pass
