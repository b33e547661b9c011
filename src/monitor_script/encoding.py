# encoding.py
# Canonical transport encoding for script bodies.
#
# The signer and the remote API must always see identical bytes, so every
# body passes through encode() before it is signed or sent.
#
# stdlib only.

import base64
import binascii


def encode(raw: str) -> str:
    """Standard base64 of the UTF-8 bytes of `raw`."""
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode(canonical: str) -> str:
    """
    Inverse of encode().

    Raises ValueError if `canonical` is not strict base64 of a UTF-8 string.
    """
    try:
        data = base64.b64decode(canonical.encode("ascii"), validate=True)
        return data.decode("utf-8")
    except (binascii.Error, UnicodeError) as exc:
        raise ValueError(f"Not a canonical script body: {canonical!r}") from exc
