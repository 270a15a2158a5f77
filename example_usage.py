#!/usr/bin/env python3
"""
Basic usage examples for the ACS request signer.

This script reproduces the V3 signature documentation example, then shows
how to sign a requests.PreparedRequest. Nothing is sent over the network.
"""

import logging
import sys

import requests

from acs_signer import (
    ACSAuth,
    Credential,
    FixedClock,
    FixedNonceProvider,
    ProtocolVersion,
    SignerError,
    SignInput,
    Signer,
)


def main():
    """Run basic usage examples."""

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    print("=== ACS Signer Basic Usage Examples ===\n")

    # Example 1: documentation vector with a frozen clock and nonce
    print("1. Reproducing the documented V3 signature...")
    signer = Signer(
        Credential("YourAccessKeyId", "YourAccessKeySecret"),
        clock=FixedClock("2023-10-26T10:22:32Z"),
        nonce_provider=FixedNonceProvider("3156853299f313e23d1673dc12e1703d"),
    )
    signed = signer.sign(SignInput(
        method="POST",
        host="ecs.cn-shanghai.aliyuncs.com",
        action="RunInstances",
        version="2014-05-26",
        query_params={
            "ImageId": "win2019_1809_x64_dtc_zh-cn_40G_alibase_20230811.vhd",
            "RegionId": "cn-shanghai",
        },
    ))
    print(f"   Query: {signed.query_string}")
    print(f"   SignedHeaders: {signed.signed_headers}")
    print(f"   Signature: {signed.signature}")
    print()

    # Example 2: sign a prepared request with real time and nonces
    print("2. Signing a requests.PreparedRequest...")
    try:
        credential = Credential.from_env()
    except SignerError as e:
        print(f"   {e}; using placeholder credentials")
        credential = Credential("YourAccessKeyId", "YourAccessKeySecret")

    auth = ACSAuth(Signer(credential), action="DescribeRegions", version="2014-05-26")
    prepared = requests.Request(
        "POST", "https://ecs.cn-hangzhou.aliyuncs.com/?AcceptLanguage=en-US", auth=auth,
    ).prepare()
    print(f"   URL: {prepared.url}")
    print(f"   Authorization: {prepared.headers['Authorization'][:60]}...")
    print()

    # Example 3: legacy query signature
    print("3. Signing with the legacy RPC scheme...")
    legacy = Signer(credential, protocol=ProtocolVersion.RPC_V1)
    signed = legacy.sign(SignInput(
        method="GET",
        host="cdn.aliyuncs.com",
        action="DescribeRefreshTasks",
        version="2018-05-10",
        query_params={"PageSize": "20"},
    ))
    print(f"   URL: https://cdn.aliyuncs.com/?{signed.query_string}")


if __name__ == "__main__":
    try:
        main()
    except SignerError as e:
        print(f"Signer Error: {e}")
        sys.exit(1)
