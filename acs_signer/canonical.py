"""
Request canonicalization for ACS signatures.

The signer and the remote verifier compute these strings independently, so
every function here must be byte-exact and deterministic. Nothing in this
module depends on dict iteration order: names and keys are always sorted
before being emitted.
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import quote, unquote_to_bytes

from .constants import (
    ACS_HEADER_PREFIX,
    HEADER_ACS_ACTION,
    HEADER_ACS_CONTENT_SHA256,
    HEADER_ACS_DATE,
    HEADER_ACS_NONCE,
    HEADER_ACS_VERSION,
    HEADER_CONTENT_TYPE,
    HEADER_HOST,
)
from .exceptions import EncodingFailureError

HeaderItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def to_bytes(value: Any) -> bytes:
    """
    Encode request text as UTF-8.

    Values that are neither text nor bytes (numbers in query params) are
    converted with ``str()`` first.

    Raises:
        EncodingFailureError: If the text holds code points UTF-8 cannot
            represent (lone surrogates)
    """
    if value is None:
        return b''
    if isinstance(value, bytes):
        return value
    if not isinstance(value, str):
        value = str(value)
    try:
        return value.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodingFailureError(f"Cannot encode text as UTF-8: {e.reason}") from e


def percent_encode(value: Union[str, bytes]) -> str:
    """
    Percent-encode a value using the RFC 3986 unreserved set.

    ALPHA, DIGIT and ``-_.~`` are left as they are; every other byte,
    ``/`` included, becomes ``%XX`` with uppercase hex digits.
    """
    return quote(to_bytes(value), safe='')


def canonicalize_uri(path: str, encoded: bool = False) -> str:
    """
    Build the CanonicalURI for a request path.

    Each segment is encoded on its own and the slashes between segments are
    kept. A trailing slash survives only if the original path had one.

    Args:
        path: Request path
        encoded: The path is already percent-encoded, as in a URL; each
            segment is decoded before being re-encoded, so ``%2F`` stays
            inside its segment

    Returns:
        Canonical URI, always starting with ``/``
    """
    if not path or path == '/':
        return '/'

    trimmed = path.strip('/')
    if not trimmed:
        return '/'

    segments = trimmed.split('/')
    if encoded:
        segments = [unquote_to_bytes(segment) for segment in segments]
    segments = [percent_encode(segment) for segment in segments]
    canonical = '/' + '/'.join(segments)
    if path.endswith('/'):
        canonical += '/'
    return canonical


def canonical_query_string(params: Optional[Mapping[str, str]]) -> str:
    """
    Build the CanonicalQueryString from request parameters.

    Parameters are sorted by the UTF-8 bytes of their key, then each key and
    value is encoded independently and joined as ``key=value`` pairs.

    Args:
        params: Query parameters (keys are unique)

    Returns:
        Canonical query string, or an empty string when there are no params
    """
    if not params:
        return ''

    pairs = sorted(((to_bytes(k), to_bytes(v)) for k, v in params.items()), key=lambda kv: kv[0])
    return '&'.join(f"{percent_encode(k)}={percent_encode(v)}" for k, v in pairs)


def normalize_headers(headers: HeaderItems) -> Dict[str, str]:
    """Lower-case and trim header names, trim values; later entries win."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    return {name.strip().lower(): str(value).strip() for name, value in items}


def canonical_headers(header_set: HeaderItems) -> str:
    """
    Build the CanonicalHeaders block.

    Returns:
        ``name:value\\n`` for each header in sorted name order
    """
    normalized = normalize_headers(header_set)
    return ''.join(f"{name}:{normalized[name]}\n" for name in sorted(normalized))


def signed_headers_list(header_set: HeaderItems) -> str:
    """Build the SignedHeaders list: sorted header names joined by ``;``."""
    return ';'.join(sorted(normalize_headers(header_set)))


def is_signed_header(name: str) -> bool:
    """Check whether a header takes part in the V3 signature."""
    name = name.strip().lower()
    return name in (HEADER_HOST, HEADER_CONTENT_TYPE) or name.startswith(ACS_HEADER_PREFIX)


def build_signing_headers(
    host: str,
    action: str,
    version: str,
    timestamp: str,
    nonce: str,
    body_hash: str,
    content_type: Optional[str] = None,
    extra_headers: Optional[HeaderItems] = None,
) -> Dict[str, str]:
    """
    Build the set of headers that participate in the V3 signature.

    Caller headers are filtered to ``host``, ``content-type`` and ``x-acs-*``
    and inserted first; the protocol values are then written over them.
    """
    signing_headers = {
        name: value
        for name, value in normalize_headers(extra_headers or {}).items()
        if is_signed_header(name)
    }

    signing_headers[HEADER_HOST] = host.strip()
    signing_headers[HEADER_ACS_ACTION] = action.strip()
    signing_headers[HEADER_ACS_VERSION] = version.strip()
    signing_headers[HEADER_ACS_DATE] = timestamp
    signing_headers[HEADER_ACS_NONCE] = nonce
    signing_headers[HEADER_ACS_CONTENT_SHA256] = body_hash
    if content_type is not None:
        signing_headers[HEADER_CONTENT_TYPE] = content_type.strip()

    return signing_headers
