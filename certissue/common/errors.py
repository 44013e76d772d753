"""Issuance failures: one exception type per step that can fail."""


class IssuanceError(Exception):
    """Base class. `step` names the issuance step that failed."""

    step = "issue"

    def __init__(self, message: str, step: str = None):
        super().__init__(message)
        if step is not None:
            self.step = step


class ConfigError(IssuanceError):
    step = "config"


class DistinguishedNameError(IssuanceError):
    step = "names"


class KeyGenerationError(IssuanceError):
    step = "keygen"


class EncodingError(IssuanceError):
    step = "serial"


class ExtensionError(IssuanceError):
    step = "extensions"


class SigningError(IssuanceError):
    step = "sign"


class CertificateBuildError(IssuanceError):
    step = "build"


class ValidityError(IssuanceError):
    """Certificate is outside its validity window."""

    step = "validity"
    NOT_YET_VALID = "not-yet-valid"
    EXPIRED = "expired"

    def __init__(self, reason: str, message: str = None):
        self.reason = reason
        if message is None:
            message = f"BAD CERT: {reason.upper()}"
        super().__init__(message)


class SignatureVerificationError(IssuanceError):
    step = "verify"
