"""
ACS Request Signer

Canonicalizes and signs requests for the vendor's OpenAPI gateway using the
ACS3-HMAC-SHA256 scheme, with the legacy RPC query signature available
through the same interface.

Example usage:
    from acs_signer import Credential, SignInput, Signer

    signer = Signer(Credential("your-access-key-id", "your-access-key-secret"))
    signed = signer.sign(SignInput(
        method="POST",
        host="ecs.cn-shanghai.aliyuncs.com",
        action="DescribeRegions",
        version="2014-05-26",
    ))
    signed.headers["Authorization"]
"""

from .auth import ACSAuth
from .canonical import (
    canonical_headers,
    canonical_query_string,
    canonicalize_uri,
    percent_encode,
    signed_headers_list,
)
from .constants import (
    ALGORITHM_V3,
    DEFAULT_CONFIG,
    EMPTY_BODY_SHA256,
)
from .exceptions import (
    SignerError,
    InvalidHeaderValueError,
    EncodingFailureError,
    ConfigurationError
)
from .providers import (
    FixedClock,
    FixedNonceProvider,
    HexNonceProvider,
    SystemClock,
    UuidNonceProvider,
)
from .signer import (
    Credential,
    ProtocolVersion,
    SignedRequest,
    SignInput,
    Signer,
)

__version__ = "1.0.0"
__all__ = [
    "ACSAuth",
    "Credential",
    "ProtocolVersion",
    "SignedRequest",
    "SignInput",
    "Signer",
    "SignerError",
    "InvalidHeaderValueError",
    "EncodingFailureError",
    "ConfigurationError",
    "FixedClock",
    "FixedNonceProvider",
    "HexNonceProvider",
    "SystemClock",
    "UuidNonceProvider",
    "canonical_headers",
    "canonical_query_string",
    "canonicalize_uri",
    "percent_encode",
    "signed_headers_list",
    "ALGORITHM_V3",
    "DEFAULT_CONFIG",
    "EMPTY_BODY_SHA256",
]
