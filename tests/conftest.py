"""
pytest configuration and fixtures shared by the issuer tests.
Most tests use 2048-bit keys to keep RSA key generation quick.
"""
import sys
import os
# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from certissue.common.config import IssuerConfig
from certissue.issuer import issue_self_signed_certificate

CERT_ENV_VARS = ("CERT_ISSUER", "CERT_SUBJECT", "CERT_KEY_SIZE", "CERT_VALID_DAYS", "CERT_HASH", "CERT_SERIAL_MODE")


@pytest.fixture
def fast_config():
    """Default names and validity, smaller key."""
    return IssuerConfig(key_size=2048)


@pytest.fixture(scope="session")
def issued():
    """One certificate issued with the default names, reused across read-only tests."""
    return issue_self_signed_certificate(IssuerConfig(key_size=2048))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CERT_* settings from the developer's shell out of the tests."""
    for var in CERT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
