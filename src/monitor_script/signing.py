# signing.py
# HMAC-SHA256 authentication tags for monitor script locations.
#
# Tags are computed over the canonical (base64) body, never the raw text.
# By default the tag does not depend on the location name, so every location
# in one call receives the same tag. bind_location_name=True authenticates
# name + "\n" + body instead; that produces different tags and must be
# enabled on purpose.
#
# Pure functions: no logging, no I/O. The secret is always supplied by the
# caller.

import hashlib
import hmac
from collections.abc import Iterable

from monitor_script.models import MonitorScript, ScriptLocation


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def _message(canonical_body: str, location_name: str | None) -> bytes:
    if location_name is None:
        return canonical_body.encode("utf-8")
    # Newline never occurs in base64, so the name boundary is unambiguous.
    return (location_name + "\n" + canonical_body).encode("utf-8")


def compute_tag(canonical_body: str, secret: bytes, location_name: str | None = None) -> str:
    """Hex-encoded HMAC-SHA256 of the canonical body (64 characters)."""
    return hmac.new(secret, _message(canonical_body, location_name), hashlib.sha256).hexdigest()


def sign_locations(
    canonical_body: str,
    locations: Iterable[ScriptLocation],
    secret: bytes,
    *,
    bind_location_name: bool = False,
) -> list[ScriptLocation]:
    """
    Return one freshly tagged ScriptLocation per input location, in order.

    Any tag already present on the inputs is ignored.
    """
    shared = None if bind_location_name else compute_tag(canonical_body, secret)
    signed: list[ScriptLocation] = []
    for location in locations:
        tag = shared if shared is not None else compute_tag(canonical_body, secret, location.name)
        signed.append(ScriptLocation(name=location.name, hmac=tag))
    return signed


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def verify_locations(
    script: MonitorScript,
    secret: bytes,
    *,
    bind_location_name: bool = False,
) -> list[str]:
    """
    Recompute every location tag from the script body.

    Returns the names of locations whose stored tag does not match. An empty
    list means the script is intact.
    """
    mismatched: list[str] = []
    for location in script.locations:
        name = location.name if bind_location_name else None
        expected = compute_tag(script.text, secret, name)
        if not hmac.compare_digest(expected, location.hmac):
            mismatched.append(location.name)
    return mismatched
