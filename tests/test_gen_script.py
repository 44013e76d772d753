"""scripts/gen_self_signed.py: writes the certificate PEM only and prints one base64 line."""
import os
import sys
import importlib.util

from cryptography import x509

from certissue.common.utils import b64d
from certissue.crypto.pki import load_der_cert

SCRIPT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts", "gen_self_signed.py")


def load_script():
    spec = importlib.util.spec_from_file_location("gen_self_signed", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_writes_certificate_pem_only(monkeypatch, capsys, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CERT_KEY_SIZE", "2048")
    out = tmp_path / "out.pem"
    monkeypatch.setattr(sys, "argv", ["gen_self_signed.py", str(out)])

    assert load_script().main() == 0

    pem = out.read_bytes()
    assert pem.count(b"-----BEGIN CERTIFICATE-----") == 1
    assert b"PRIVATE KEY" not in pem
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert load_der_cert(b64d(lines[0])) == x509.load_pem_x509_certificate(pem)


def test_default_path_under_certs(monkeypatch, capsys, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CERT_KEY_SIZE", "2048")
    monkeypatch.setattr(sys, "argv", ["gen_self_signed.py"])

    assert load_script().main() == 0
    assert (tmp_path / "certs" / "self_signed.pem").exists()


def test_failure_writes_nothing(monkeypatch, capsys, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CERT_KEY_SIZE", "100")
    out = tmp_path / "out.pem"
    monkeypatch.setattr(sys, "argv", ["gen_self_signed.py", str(out)])

    assert load_script().main() == 1
    assert not out.exists()
    assert capsys.readouterr().out == ""
