"""
Constants for the ACS request signer.
Header names and identifiers follow the vendor's V3 request structure.
"""

# Signature algorithms
ALGORITHM_V3 = "ACS3-HMAC-SHA256"
ALGORITHM_RPC_V1 = "HMAC-SHA256"
RPC_SIGNATURE_VERSION = "1.0"

# HTTP Headers (lower-cased, as they appear in the canonical request)
HEADER_HOST = "host"
HEADER_CONTENT_TYPE = "content-type"
HEADER_AUTHORIZATION = "Authorization"
HEADER_ACS_ACTION = "x-acs-action"
HEADER_ACS_VERSION = "x-acs-version"
HEADER_ACS_DATE = "x-acs-date"
HEADER_ACS_NONCE = "x-acs-signature-nonce"
HEADER_ACS_CONTENT_SHA256 = "x-acs-content-sha256"

# Headers carrying this prefix always take part in the signature
ACS_HEADER_PREFIX = "x-acs-"

# ISO 8601, second precision, always UTC
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# SHA-256 of the empty byte string
EMPTY_BODY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Environment variables read by Credential.from_env()
ENV_ACCESS_KEY_ID = "ALIBABA_CLOUD_ACCESS_KEY_ID"
ENV_ACCESS_KEY_SECRET = "ALIBABA_CLOUD_ACCESS_KEY_SECRET"

# Default configuration values
DEFAULT_CONFIG = {
    'protocol': 'v3',       # 'v3' (ACS3-HMAC-SHA256) or 'rpc_v1' (legacy query signing)
    'nonce_style': None,    # 'hex' or 'uuid'; None picks the protocol's default
}

NONCE_STYLES = ('hex', 'uuid')
