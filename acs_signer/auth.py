"""
requests integration.

``ACSAuth`` signs a ``requests.PreparedRequest`` in place; sending it is up
to the caller's own session:

    from acs_signer import ACSAuth, Credential, Signer

    signer = Signer(Credential.from_env())
    auth = ACSAuth(signer, action="DescribeRegions", version="2014-05-26")
    response = requests.post("https://ecs.cn-shanghai.aliyuncs.com/", auth=auth)
"""

from urllib.parse import parse_qsl, urlsplit, urlunsplit

import requests
from requests.auth import AuthBase

from .canonical import canonicalize_uri
from .signer import SignInput, Signer


class ACSAuth(AuthBase):
    """Attach an ACS signature to outgoing requests."""

    def __init__(self, signer: Signer, action: str, version: str):
        self.signer = signer
        self.action = action
        self.version = version

    @staticmethod
    def _host(parts) -> str:
        """Host and port from the URL, without any userinfo."""
        host = parts.hostname or ''
        if ':' in host:
            host = f"[{host}]"
        if parts.port is not None:
            host = f"{host}:{parts.port}"
        return host

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        parts = urlsplit(r.url)
        host = self._host(parts)

        # Later duplicates win, as they do for headers
        query_params = dict(parse_qsl(parts.query, keep_blank_values=True))

        body = r.body
        if body is not None and not isinstance(body, (bytes, str)):
            # Streamed bodies cannot be hashed up front
            raise TypeError("ACSAuth cannot sign streaming request bodies")

        sign_input = SignInput(
            method=r.method,
            host=host,
            canonical_uri_raw=parts.path,
            action=self.action,
            version=self.version,
            query_params=query_params,
            body=body,
            content_type=r.headers.get('Content-Type'),
            extra_headers=dict(r.headers),
            canonical_uri_encoded=True,
        )
        signed = self.signer.sign(sign_input)

        canonical_uri = canonicalize_uri(parts.path, encoded=True)
        r.url = urlunsplit((parts.scheme, host, canonical_uri, signed.query_string, ''))
        r.headers.update(signed.headers)
        return r
