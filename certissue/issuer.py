"""Self-signed certificate issuer: RSA key → X.509 builder → sign → self-check → base64(DER)."""

import sys
import datetime
import logging
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from certissue.common.config import IssuerConfig
from certissue.common.errors import CertificateBuildError, ExtensionError, IssuanceError
from certissue.common.utils import b64e, utc_now
from certissue.crypto.names import format_dn, parse_dn
from certissue.crypto.pki import describe_cert, verify_self_signed
from certissue.crypto.provider import CryptoProvider
from certissue.crypto.serial import make_serial

logger = logging.getLogger(__name__)


@dataclass
class IssuedCertificate:
    certificate: x509.Certificate
    private_key: object  # in memory only, never written out
    der: bytes
    b64: str

    def to_pem(self) -> bytes:
        return self.certificate.public_bytes(serialization.Encoding.PEM)


def issue_self_signed_certificate(config: IssuerConfig = None, provider: CryptoProvider = None, now=None) -> IssuedCertificate:
    """
    Issue one self-signed end-entity certificate.

    Steps, each a precondition for the next:
      1. RSA key pair of config.key_size bits
      2. serial number (config.serial_mode)
      3. validity window [now, now + config.valid_days]
      4. builder: issuer, subject, serial, window, subject public key
      5. basicConstraints CA=false, non-critical
      6. sign with the private key (SHA-256 with RSA by default)
      7. self-check: window contains the current instant, signature verifies
      8. DER → base64 text

    Any failure raises the matching IssuanceError subclass; nothing partial
    is returned.
    """
    if config is None:
        config = IssuerConfig()
    if provider is None:
        provider = CryptoProvider()

    issuer = parse_dn(config.issuer)
    subject = parse_dn(config.subject_dn)

    # -------------------- KEYS -------------------- #
    logger.info(f"Generating RSA-{config.key_size} key pair...")
    key = provider.generate_rsa_key(config.key_size, config.public_exponent)
    public_key = key.public_key()
    logger.info("✓ Key pair generated")

    # -------------------- SERIAL + VALIDITY -------------------- #
    serial = make_serial(config.serial_mode)
    not_before = utc_now() if now is None else now.replace(microsecond=0)
    if not_before.tzinfo is None:
        not_before = not_before.replace(tzinfo=datetime.timezone.utc)
    not_after = not_before + config.validity

    # -------------------- BUILD -------------------- #
    try:
        builder = (
            x509.CertificateBuilder()
            .issuer_name(issuer)
            .serial_number(serial)
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .subject_name(subject)
            .public_key(public_key)
        )
    except (TypeError, ValueError) as e:
        raise CertificateBuildError(f"Could not assemble certificate fields: {e}") from e

    try:
        builder = builder.add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=False)
    except (TypeError, ValueError) as e:
        raise ExtensionError(f"Error while adding the basic constraints extension: {e}") from e

    # -------------------- SIGN -------------------- #
    algorithm = provider.hash_for(config.hash_algorithm)
    cert = provider.sign(builder, key, algorithm)
    logger.info(f"✓ Signed certificate serial={serial:x} subject={format_dn(cert.subject)}")

    # -------------------- SELF-CHECK -------------------- #
    verify_self_signed(cert, public_key, provider)
    logger.info("✓ Certificate valid and signature verified")

    der = cert.public_bytes(serialization.Encoding.DER)
    return IssuedCertificate(certificate=cert, private_key=key, der=der, b64=b64e(der))


def main(argv=None):
    """Issue from CERT_* environment settings and print the base64 certificate line."""
    if argv is None:
        argv = sys.argv[1:]
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    # Load environment variables from .env file if it exists
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = IssuerConfig.from_env()
        issued = issue_self_signed_certificate(config)
    except IssuanceError as e:
        logger.error(f"❌ {e.step} failed: {e}")
        return 1

    if "--describe" in argv:
        for field, value in describe_cert(issued.certificate).items():
            logger.info(f"  {field}: {value}")

    print(issued.b64)
    return 0


if __name__ == "__main__":
    sys.exit(main())
