"""
Certificate serial numbers.

uuid_text_serial: UTF-8 bytes of a random UUID's canonical text, read as a
big-endian signed integer. The full 36-byte value does not fit X.509's
20-octet serial field, so only the trailing 20 bytes are kept and the top
bit is cleared: the result is positive and below 2**159.
"""
import uuid

from cryptography import x509

from certissue.common.errors import EncodingError

MAX_SERIAL_BYTES = 20


def uuid_text_serial(u: uuid.UUID = None) -> int:
    if u is None:
        u = uuid.uuid4()
    try:
        raw = str(u).encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Could not encode UUID text as UTF-8: {e}") from e

    raw = raw[-MAX_SERIAL_BYTES:]
    serial = int.from_bytes(raw, "big", signed=True) & ((1 << 159) - 1)
    if serial == 0:
        # unreachable for UUID text (hex digits and '-' are never NUL)
        raise EncodingError(f"UUID {u} produced a zero serial")
    return serial


def random_serial() -> int:
    return x509.random_serial_number()


def make_serial(mode: str = "uuid-text") -> int:
    if mode == "uuid-text":
        return uuid_text_serial()
    if mode == "random":
        return random_serial()
    raise EncodingError(f"Unknown serial mode {mode!r}")
