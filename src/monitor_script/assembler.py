# assembler.py
# Builds the remote-facing MonitorScript from declared fields.

from collections.abc import Iterable

from monitor_script.encoding import encode
from monitor_script.models import MonitorScript, ScriptLocation
from monitor_script.signing import sign_locations

# The remote API has no delete verb for scripts; deleting means overwriting
# the body with this placeholder.
BLANK_SCRIPT_TEXT = " "


def assemble(
    raw_body: str,
    locations: Iterable[ScriptLocation],
    secret: bytes,
    *,
    bind_location_name: bool = False,
) -> MonitorScript:
    """Encode the body and sign each location against the encoded body."""
    canonical = encode(raw_body)
    return MonitorScript(
        text=canonical,
        locations=sign_locations(canonical, locations, secret, bind_location_name=bind_location_name),
    )


def blank_script() -> MonitorScript:
    return MonitorScript(text=BLANK_SCRIPT_TEXT, locations=[])
