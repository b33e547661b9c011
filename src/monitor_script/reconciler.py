# reconciler.py
# Projects a remote MonitorScript back onto declarative resource fields.
#
# Pure projection: the remote representation is trusted as-is. Integrity
# checks, when enabled, happen in the lifecycle controller.

from typing import Any

from monitor_script.encoding import decode
from monitor_script.models import MonitorScript


def _plaintext(body: str) -> str:
    # Bodies that are not canonical base64 (e.g. the blank delete
    # placeholder) are passed through verbatim.
    try:
        return decode(body)
    except ValueError:
        return body


def reconcile(remote: MonitorScript) -> dict[str, Any]:
    """Return the `text` and `locations` fields for a ScriptResource."""
    return {
        "text": _plaintext(remote.text),
        "locations": [{"name": loc.name, "hmac": loc.hmac} for loc in remote.locations],
    }
