"""Pydantic model for issuer settings + environment loading (CERT_* variables)."""

import os
import datetime
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

from certissue.common.errors import ConfigError
from certissue.common.utils import days_to_ms


DEFAULT_DN = "E=,CN=TestIssuer,O=,OU=,L=,ST=,C=DE"

SUPPORTED_HASHES = ("SHA256", "SHA384", "SHA512")
SERIAL_MODES = ("uuid-text", "random")

# env var -> config field
ENV_FIELDS = {
    "CERT_ISSUER": "issuer",
    "CERT_SUBJECT": "subject",
    "CERT_KEY_SIZE": "key_size",
    "CERT_VALID_DAYS": "valid_days",
    "CERT_HASH": "hash_algorithm",
    "CERT_SERIAL_MODE": "serial_mode",
}


class IssuerConfig(BaseModel):
    """
    Settings for one self-signed issuance.

      issuer          DN string, comma-separated KEY=value pairs
      subject         DN string; None means same as issuer (self-issued)
      key_size        RSA modulus length in bits
      public_exponent RSA public exponent
      valid_days      validity span, counted as fixed 86,400,000 ms days
      hash_algorithm  digest used with RSA PKCS#1 v1.5 (SHA256 → SHA256withRSA)
      serial_mode     "uuid-text" (serial from a UUID's text) or "random"
    """

    issuer: str = DEFAULT_DN
    subject: Optional[str] = None
    key_size: int = 4096
    public_exponent: int = 65537
    valid_days: int = 365
    hash_algorithm: str = "SHA256"
    serial_mode: str = "uuid-text"

    @field_validator("key_size")
    @classmethod
    def _key_size_ok(cls, v: int) -> int:
        if v < 1024 or v % 256:
            raise ValueError("key_size must be >= 1024 and a multiple of 256")
        return v

    @field_validator("valid_days")
    @classmethod
    def _days_ok(cls, v: int) -> int:
        if v < 1:
            raise ValueError("valid_days must be at least 1")
        return v

    @field_validator("hash_algorithm")
    @classmethod
    def _hash_ok(cls, v: str) -> str:
        v = v.upper().replace("-", "")
        if v not in SUPPORTED_HASHES:
            raise ValueError(f"hash_algorithm must be one of {', '.join(SUPPORTED_HASHES)}")
        return v

    @field_validator("serial_mode")
    @classmethod
    def _serial_mode_ok(cls, v: str) -> str:
        if v not in SERIAL_MODES:
            raise ValueError(f"serial_mode must be one of {', '.join(SERIAL_MODES)}")
        return v

    @property
    def subject_dn(self) -> str:
        return self.issuer if self.subject is None else self.subject

    @property
    def validity(self) -> datetime.timedelta:
        return datetime.timedelta(milliseconds=days_to_ms(self.valid_days))

    @classmethod
    def build(cls, **values) -> "IssuerConfig":
        """Construct, turning pydantic validation failures into ConfigError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid issuer configuration: {e}") from e

    @classmethod
    def from_env(cls, env=None) -> "IssuerConfig":
        """
        Build a config from CERT_* environment variables.
        Unset (or empty) variables keep their defaults. Call load_dotenv()
        beforehand to pick up a .env file.
        """
        if env is None:
            env = os.environ
        values = {}
        for var, field in ENV_FIELDS.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            values[field] = raw
        return cls.build(**values)
