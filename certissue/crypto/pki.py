"""
X.509 inspection and self-check helpers.
Provides verify_self_signed(cert, public_key, provider) plus loaders/accessors.
"""
import datetime

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import serialization, hashes

from certissue.common.errors import SignatureVerificationError, ValidityError
from certissue.common.utils import b64d, utc_now
from certissue.crypto.names import format_dn


def load_cert(pem_bytes):
    """Load certificate from PEM bytes (string or bytes)."""
    if isinstance(pem_bytes, str):
        pem_bytes = pem_bytes.encode()
    return x509.load_pem_x509_certificate(pem_bytes)


def load_der_cert(der: bytes):
    return x509.load_der_x509_certificate(der)


def load_b64_cert(text: str):
    """Load certificate from a base64(DER) line, as printed by the issuer."""
    return load_der_cert(b64d(text.strip()))


def get_cn(cert: x509.Certificate):
    attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    return attrs[0].value if attrs else None


def get_cert_fingerprint(cert: x509.Certificate) -> str:
    """Return SHA-256 fingerprint of certificate as hex string."""
    return cert.fingerprint(hashes.SHA256()).hex()


def get_basic_constraints(cert: x509.Certificate):
    """Return (ca, critical) of the basic-constraints extension, or None if absent."""
    try:
        ext = cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return None
    return ext.value.ca, ext.critical


def check_validity(cert: x509.Certificate, now=None):
    """Raise ValidityError unless now lies inside [notBefore, notAfter]. A naive now is taken as UTC."""
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    if cert.not_valid_before_utc > now:
        raise ValidityError(
            ValidityError.NOT_YET_VALID,
            f"BAD CERT: NOT YET VALID (valid from {cert.not_valid_before_utc.isoformat()})",
        )
    if cert.not_valid_after_utc < now:
        raise ValidityError(
            ValidityError.EXPIRED,
            f"BAD CERT: EXPIRED (valid until {cert.not_valid_after_utc.isoformat()})",
        )


def _public_der(key) -> bytes:
    return key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def verify_self_signed(cert: x509.Certificate, public_key, provider, now=None):
    """
    Post-issuance sanity check.
    cert:       freshly signed certificate
    public_key: public half of the key pair that signed it
    provider:   CryptoProvider used for signature verification
    """
    check_validity(cert, now)
    # embedded SubjectPublicKeyInfo must be the key pair's own public key
    if _public_der(cert.public_key()) != _public_der(public_key):
        raise SignatureVerificationError("BAD CERT: embedded public key does not match key pair")
    provider.verify(public_key, cert)
    return True


def describe_cert(cert: x509.Certificate) -> dict:
    bc = get_basic_constraints(cert)
    return {
        "issuer": format_dn(cert.issuer),
        "subject": format_dn(cert.subject),
        "serial": cert.serial_number,
        "not_before": cert.not_valid_before_utc.isoformat(),
        "not_after": cert.not_valid_after_utc.isoformat(),
        "basic_constraints": None if bc is None else {"ca": bc[0], "critical": bc[1]},
        "signature_algorithm": cert.signature_algorithm_oid.dotted_string,
        "signature_hash": cert.signature_hash_algorithm.name,
        "sha256": get_cert_fingerprint(cert),
    }
