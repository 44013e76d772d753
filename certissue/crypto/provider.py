"""
RSA keygen + PKCS#1 v1.5 sign/verify with cryptography, behind one handle.

The issuer takes a CryptoProvider argument instead of relying on a global
backend, so tests can pass a subclass that fails on purpose.
"""
from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from certissue.common.errors import (
    CertificateBuildError, KeyGenerationError, SignatureVerificationError, SigningError,
)

_HASHES = {
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}


class CryptoProvider:
    name = "cryptography"

    def generate_rsa_key(self, key_size: int, public_exponent: int = 65537) -> rsa.RSAPrivateKey:
        try:
            return rsa.generate_private_key(public_exponent=public_exponent, key_size=key_size)
        except (ValueError, UnsupportedAlgorithm) as e:
            raise KeyGenerationError(f"RSA-{key_size} key generation failed: {e}") from e

    def hash_for(self, name: str) -> hashes.HashAlgorithm:
        try:
            return _HASHES[name.upper()]()
        except KeyError:
            raise SigningError(f"Unsupported signature hash {name!r}") from None

    def sign(self, builder: x509.CertificateBuilder, private_key, algorithm: hashes.HashAlgorithm) -> x509.Certificate:
        """Sign the assembled builder, producing an encoded certificate."""
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise SigningError(
                f"{type(private_key).__name__} cannot produce {algorithm.name}withRSA signatures"
            )
        try:
            return builder.sign(private_key=private_key, algorithm=algorithm, rsa_padding=padding.PKCS1v15())
        except (TypeError, UnsupportedAlgorithm) as e:
            raise SigningError(f"Signing failed: {e}") from e
        except ValueError as e:
            raise CertificateBuildError(f"Certificate could not be built: {e}") from e

    def verify(self, public_key, cert: x509.Certificate) -> None:
        """Check cert's signature under public_key; raises SignatureVerificationError."""
        hash_algorithm = cert.signature_hash_algorithm
        if hash_algorithm is None:
            hash_algorithm = hashes.SHA256()
        try:
            public_key.verify(
                cert.signature,
                cert.tbs_certificate_bytes,
                padding.PKCS1v15(),
                hash_algorithm,
            )
        except InvalidSignature as e:
            raise SignatureVerificationError("BAD CERT: signature invalid") from e
        except (TypeError, AttributeError, UnsupportedAlgorithm) as e:
            raise SignatureVerificationError(f"BAD CERT: cannot verify signature ({e})") from e
