#!/usr/bin/env python3
"""
Issue a self-signed end-entity certificate (RSA key + X.509 cert, CA=false).
Settings come from CERT_* environment variables (or a .env file).
Writes:
  certs/self_signed.pem   (or the path given as first argument)
The private key stays in memory and is discarded on exit.
Prints the base64(DER) certificate line on stdout.
"""
import os
import sys
import logging
from dotenv import find_dotenv, load_dotenv

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certissue.common.config import IssuerConfig
from certissue.common.errors import IssuanceError
from certissue.issuer import issue_self_signed_certificate

OUT_PATH = os.path.join("certs", "self_signed.pem")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    load_dotenv(find_dotenv(usecwd=True))
    out_path = sys.argv[1] if len(sys.argv) > 1 else OUT_PATH

    try:
        issued = issue_self_signed_certificate(IssuerConfig.from_env())
    except IssuanceError as e:
        logging.error(f"❌ {e.step} failed: {e}")
        return 1

    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(out_path, "wb") as f:
        f.write(issued.to_pem())

    logging.info(f"Wrote {out_path}")
    print(issued.b64)
    return 0


if __name__ == "__main__":
    sys.exit(main())
