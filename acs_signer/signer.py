"""
Request signer for the vendor's OpenAPI authentication schemes.

Two protocol versions are supported:

* V3 (``ACS3-HMAC-SHA256``): the canonical request is hashed, prefixed with
  the algorithm name and signed with HMAC-SHA256 keyed by the raw secret.
  The result travels in the ``Authorization`` header as lowercase hex.
* RPC V1 (legacy): the sorted query string is signed with HMAC-SHA256 keyed
  by ``secret + "&"``; the base64 digest is appended to the query string as
  the ``Signature`` parameter.

Both schemes share the RFC 3986 percent-encoder from ``canonical``.
"""

import abc
import base64
import enum
import hashlib
import hmac
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .canonical import (
    build_signing_headers,
    canonical_headers,
    canonical_query_string,
    canonicalize_uri,
    percent_encode,
    signed_headers_list,
    to_bytes,
)
from .constants import (
    ALGORITHM_RPC_V1,
    ALGORITHM_V3,
    DEFAULT_CONFIG,
    ENV_ACCESS_KEY_ID,
    ENV_ACCESS_KEY_SECRET,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_HOST,
    NONCE_STYLES,
    RPC_SIGNATURE_VERSION,
)
from .exceptions import ConfigurationError, InvalidHeaderValueError
from .providers import (
    Clock,
    HexNonceProvider,
    NonceProvider,
    SystemClock,
    UuidNonceProvider,
    format_timestamp,
    nonce_provider_for,
)

logger = logging.getLogger(__name__)

# RFC 7230 token
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Control bytes other than horizontal tab
_INVALID_VALUE_RE = re.compile(r'[\x00-\x08\x0a-\x1f\x7f]')


class ProtocolVersion(enum.Enum):
    V3 = 'v3'
    RPC_V1 = 'rpc_v1'


@dataclass(frozen=True)
class Credential:
    """Access key pair. The secret is kept out of ``repr()``."""

    access_key_id: str
    access_key_secret: str = field(repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Credential':
        """
        Load the access key pair from environment variables.

        Raises:
            ConfigurationError: If either variable is missing or empty
        """
        environ = os.environ if environ is None else environ
        access_key_id = environ.get(ENV_ACCESS_KEY_ID, '').strip()
        access_key_secret = environ.get(ENV_ACCESS_KEY_SECRET, '').strip()
        if not access_key_id:
            raise ConfigurationError(f"{ENV_ACCESS_KEY_ID} is not set")
        if not access_key_secret:
            raise ConfigurationError(f"{ENV_ACCESS_KEY_SECRET} is not set")
        return cls(access_key_id, access_key_secret)


@dataclass(frozen=True)
class SignInput:
    """Everything the signer needs to know about one outgoing request."""

    method: str
    host: str
    canonical_uri_raw: str = '/'
    action: str = ''
    version: str = ''
    query_params: Mapping[str, str] = field(default_factory=dict)
    body: Union[bytes, str, None] = b''
    content_type: Optional[str] = None
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    # canonical_uri_raw is already percent-encoded (taken from a URL)
    canonical_uri_encoded: bool = False


@dataclass
class SignedRequest:
    """Artifacts to attach to the outgoing HTTP request."""

    query_string: str
    headers: CaseInsensitiveDict
    signature: str
    signed_headers: str
    timestamp: str
    nonce: str
    canonical_request: str = field(default='', repr=False)
    string_to_sign: str = field(default='', repr=False)


def sha256_hex(data: Union[bytes, str]) -> str:
    """Lowercase hex SHA-256 digest."""
    return hashlib.sha256(to_bytes(data)).hexdigest()


def hmac_sha256_hex(key: Union[bytes, str], message: Union[bytes, str]) -> str:
    """Lowercase hex HMAC-SHA256."""
    return hmac.new(to_bytes(key), to_bytes(message), hashlib.sha256).hexdigest()


def hmac_sha256_base64(key: Union[bytes, str], message: Union[bytes, str]) -> str:
    """Base64 HMAC-SHA256, as used by the legacy query signature."""
    digest = hmac.new(to_bytes(key), to_bytes(message), hashlib.sha256).digest()
    return base64.b64encode(digest).decode('ascii')


def build_canonical_request(
    method: str,
    canonical_uri: str,
    canonical_query: str,
    canonical_header_block: str,
    signed_headers: str,
    body_hash: str,
) -> str:
    """
    Assemble the V3 canonical request.

    The header block already ends with a newline, so the six parts are
    simply joined with single newlines.
    """
    return '\n'.join([
        method.strip().upper(),
        canonical_uri,
        canonical_query,
        canonical_header_block,
        signed_headers,
        body_hash,
    ])


def build_string_to_sign(hashed_canonical_request: str) -> str:
    return f"{ALGORITHM_V3}\n{hashed_canonical_request}"


def validate_headers(headers: Mapping[str, str]) -> None:
    """
    Check that every header can be put on the wire as-is.

    Raises:
        InvalidHeaderValueError: On the first name that is not a token or
            value that carries control bytes or characters outside latin-1
    """
    for name, value in headers.items():
        if not _HEADER_NAME_RE.match(name):
            raise InvalidHeaderValueError(name, "is not a valid header name")
        if _INVALID_VALUE_RE.search(value):
            raise InvalidHeaderValueError(name)
        try:
            value.encode('latin-1')
        except UnicodeEncodeError:
            raise InvalidHeaderValueError(name, "cannot be encoded as latin-1") from None


class SigningStrategy(abc.ABC):
    """One signing scheme. Strategies hold no state."""

    protocol: ProtocolVersion
    default_nonce_provider = HexNonceProvider

    @abc.abstractmethod
    def sign(self, credential: Credential, sign_input: SignInput, timestamp: str, nonce: str) -> SignedRequest:
        ...


class V3Strategy(SigningStrategy):
    """ACS3-HMAC-SHA256 header signature."""

    protocol = ProtocolVersion.V3

    def sign(self, credential: Credential, sign_input: SignInput, timestamp: str, nonce: str) -> SignedRequest:
        body_hash = sha256_hex(sign_input.body)

        signing_headers = build_signing_headers(
            host=sign_input.host,
            action=sign_input.action,
            version=sign_input.version,
            timestamp=timestamp,
            nonce=nonce,
            body_hash=body_hash,
            content_type=sign_input.content_type,
            extra_headers=sign_input.extra_headers,
        )

        canonical_uri = canonicalize_uri(sign_input.canonical_uri_raw, encoded=sign_input.canonical_uri_encoded)
        canonical_query = canonical_query_string(sign_input.query_params)
        signed_headers = signed_headers_list(signing_headers)

        canonical_request = build_canonical_request(
            sign_input.method,
            canonical_uri,
            canonical_query,
            canonical_headers(signing_headers),
            signed_headers,
            body_hash,
        )
        hashed_canonical_request = sha256_hex(canonical_request)
        string_to_sign = build_string_to_sign(hashed_canonical_request)
        signature = hmac_sha256_hex(credential.access_key_secret, string_to_sign)

        authorization = (
            f"{ALGORITHM_V3} Credential={credential.access_key_id},"
            f"SignedHeaders={signed_headers},Signature={signature}"
        )

        headers = CaseInsensitiveDict()
        for name in sorted(signing_headers):
            headers[name] = signing_headers[name]
        headers[HEADER_AUTHORIZATION] = authorization
        validate_headers(headers)

        logger.debug(
            "Signed %s %s action=%s signed_headers=%s hashed_canonical_request=%s nonce=%s",
            sign_input.method.upper(), canonical_uri, sign_input.action,
            signed_headers, hashed_canonical_request, nonce,
        )

        return SignedRequest(
            query_string=canonical_query,
            headers=headers,
            signature=signature,
            signed_headers=signed_headers,
            timestamp=timestamp,
            nonce=nonce,
            canonical_request=canonical_request,
            string_to_sign=string_to_sign,
        )


class RpcV1Strategy(SigningStrategy):
    """Legacy query-string signature (SignatureVersion 1.0)."""

    protocol = ProtocolVersion.RPC_V1
    default_nonce_provider = UuidNonceProvider

    def common_params(self, credential: Credential, sign_input: SignInput, timestamp: str, nonce: str) -> Dict[str, str]:
        return {
            'Action': sign_input.action.strip(),
            'Version': sign_input.version.strip(),
            'AccessKeyId': credential.access_key_id,
            'SignatureMethod': ALGORITHM_RPC_V1,
            'SignatureVersion': RPC_SIGNATURE_VERSION,
            'SignatureNonce': nonce,
            'Timestamp': timestamp,
        }

    def sign(self, credential: Credential, sign_input: SignInput, timestamp: str, nonce: str) -> SignedRequest:
        params = {k: v for k, v in sign_input.query_params.items() if k != 'Signature'}
        params.setdefault('Format', 'JSON')
        params.update(self.common_params(credential, sign_input, timestamp, nonce))

        canonical_query = canonical_query_string(params)
        method = sign_input.method.strip().upper()
        string_to_sign = '&'.join([method, percent_encode('/'), percent_encode(canonical_query)])
        signature = hmac_sha256_base64(credential.access_key_secret + '&', string_to_sign)

        headers = CaseInsensitiveDict()
        headers[HEADER_HOST] = sign_input.host.strip()
        if sign_input.content_type is not None:
            headers[HEADER_CONTENT_TYPE] = sign_input.content_type.strip()
        validate_headers(headers)

        logger.debug(
            "Signed legacy %s action=%s nonce=%s",
            method, sign_input.action, nonce,
        )

        return SignedRequest(
            query_string=f"{canonical_query}&Signature={percent_encode(signature)}",
            headers=headers,
            signature=signature,
            signed_headers='',
            timestamp=timestamp,
            nonce=nonce,
            canonical_request=canonical_query,
            string_to_sign=string_to_sign,
        )


STRATEGIES = {
    ProtocolVersion.V3: V3Strategy(),
    ProtocolVersion.RPC_V1: RpcV1Strategy(),
}


class Signer:
    """
    Signs outgoing requests with an access key pair.

    A signer holds only its credential, strategy and injected providers, so
    a single instance can be shared between threads. Every call to
    ``sign()`` draws a fresh timestamp and nonce.
    """

    def __init__(
        self,
        credential: Credential,
        protocol: Union[ProtocolVersion, str] = ProtocolVersion.V3,
        clock: Optional[Clock] = None,
        nonce_provider: Optional[NonceProvider] = None,
    ):
        """
        Initialize signer.

        Args:
            credential: Access key pair
            protocol: Protocol version, as enum member or its value
            clock: Source of the current time (defaults to the system clock)
            nonce_provider: Source of nonces (defaults to the protocol's own)

        Raises:
            ConfigurationError: If the credential is empty or the protocol unknown
        """
        self.credential = credential
        self.protocol = self._resolve_protocol(protocol)
        self.strategy = STRATEGIES[self.protocol]
        self.clock = clock or SystemClock()
        self.nonce_provider = nonce_provider or self.strategy.default_nonce_provider()

        self._validate_credential()

    @classmethod
    def from_config(cls, credential: Credential, clock: Optional[Clock] = None, **config) -> 'Signer':
        """
        Build a signer from configuration options.

        Args:
            credential: Access key pair
            clock: Optional clock override
            **config: Configuration options (protocol, nonce_style)
        """
        config = {**DEFAULT_CONFIG, **config}

        unknown = set(config) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigurationError(f"Unknown configuration options: {', '.join(sorted(unknown))}")

        style = config['nonce_style']
        if style is not None and style not in NONCE_STYLES:
            raise ConfigurationError(f"nonce_style must be one of {', '.join(NONCE_STYLES)}")

        nonce_provider = nonce_provider_for(style) if style else None
        return cls(credential, config['protocol'], clock=clock, nonce_provider=nonce_provider)

    @staticmethod
    def _resolve_protocol(protocol: Union[ProtocolVersion, str]) -> ProtocolVersion:
        if isinstance(protocol, ProtocolVersion):
            return protocol
        try:
            return ProtocolVersion(str(protocol).lower())
        except ValueError:
            raise ConfigurationError(f"Unknown protocol version: {protocol}") from None

    def _validate_credential(self):
        """Validate signer credential."""
        if not self.credential.access_key_id:
            raise ConfigurationError("access_key_id cannot be empty")

        if not self.credential.access_key_secret:
            raise ConfigurationError("access_key_secret cannot be empty")

    def sign(self, sign_input: SignInput) -> SignedRequest:
        """
        Sign a request.

        Args:
            sign_input: Request description

        Returns:
            Query string and headers to attach to the request

        Raises:
            InvalidHeaderValueError: If a header value cannot be sent
            EncodingFailureError: If request text is not encodable as UTF-8
        """
        timestamp = format_timestamp(self.clock.now())
        nonce = self.nonce_provider.nonce()
        return self.strategy.sign(self.credential, sign_input, timestamp, nonce)
