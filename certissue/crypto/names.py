"""
Distinguished-name strings ⇄ x509.Name.

Format: comma-separated KEY=value pairs, e.g. "E=,CN=TestIssuer,O=,C=DE".
RDNs keep the order they are written in. Values may be empty; a literal
comma inside a value is written as "\\,".

cryptography enforces length rules on two attributes: CN must be 1-64
characters and C exactly 2, so "CN=" and "C=" are rejected while the
other keys accept empty values.
"""
from cryptography import x509
from cryptography.x509.oid import NameOID

from certissue.common.errors import DistinguishedNameError

DN_KEYS = {
    "C": NameOID.COUNTRY_NAME,
    "ST": NameOID.STATE_OR_PROVINCE_NAME,
    "L": NameOID.LOCALITY_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "CN": NameOID.COMMON_NAME,
    "E": NameOID.EMAIL_ADDRESS,
    "EMAILADDRESS": NameOID.EMAIL_ADDRESS,
    "STREET": NameOID.STREET_ADDRESS,
    "DC": NameOID.DOMAIN_COMPONENT,
    "UID": NameOID.USER_ID,
    "SERIALNUMBER": NameOID.SERIAL_NUMBER,
}

# preferred short key per OID, for format_dn
_OID_KEYS = {oid: key for key, oid in reversed(list(DN_KEYS.items()))}


def _split_pairs(text: str):
    """Split on unescaped commas; '\\,' becomes ','."""
    parts, cur = [], []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            cur.append(text[i + 1])
            i += 2
            continue
        if ch == ",":
            parts.append("".join(cur))
            cur = []
        else:
            cur.append(ch)
        i += 1
    parts.append("".join(cur))
    return parts


def parse_dn(text: str) -> x509.Name:
    """Parse a DN string into an x509.Name, one attribute per RDN."""
    if not text or not text.strip():
        raise DistinguishedNameError("Distinguished name is empty")

    attrs = []
    for pair in _split_pairs(text):
        if "=" not in pair:
            raise DistinguishedNameError(f"Bad RDN {pair.strip()!r} in {text!r}: missing '='")
        key, value = pair.split("=", 1)
        key = key.strip().upper()
        oid = DN_KEYS.get(key)
        if oid is None:
            raise DistinguishedNameError(f"Unknown DN attribute type {key!r} in {text!r}")
        try:
            attrs.append(x509.NameAttribute(oid, value.strip()))
        except ValueError as e:
            raise DistinguishedNameError(f"Bad value for {key}: {e}") from e

    return x509.Name([x509.RelativeDistinguishedName([a]) for a in attrs])


def format_dn(name: x509.Name) -> str:
    """Render an x509.Name as KEY=value pairs in RDN order."""
    out = []
    for attr in name:
        key = _OID_KEYS.get(attr.oid, attr.oid.dotted_string)
        value = str(attr.value).replace("\\", "\\\\").replace(",", "\\,")
        out.append(f"{key}={value}")
    return ",".join(out)
