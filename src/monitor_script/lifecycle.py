# lifecycle.py
# Create / read / update / delete / import for a monitor script resource.
#
# The controller owns the Absent ↔ Present transitions of a ScriptResource.
# It makes exactly one blocking call to the Synthetics service per operation
# (plus the read that follows a successful write) and never retries.
#
# Absent  ──create/import──▶ Present ──delete──▶ Absent
#                            Present ──read (404)──▶ Absent

import logging

from monitor_script.assembler import assemble, blank_script
from monitor_script.client import NotFoundError, SyntheticsAPIError, SyntheticsService
from monitor_script.models import MonitorScript, ScriptResource
from monitor_script.reconciler import reconcile
from monitor_script.signing import verify_locations

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TamperDetectedError(Exception):
    """Raised when a stored location tag does not match the returned script body."""

    def __init__(self, monitor_id: str, locations: list[str]) -> None:
        super().__init__(
            f"Script for monitor '{monitor_id}' failed integrity check "
            f"at location(s): {', '.join(locations)}."
        )
        self.monitor_id = monitor_id
        self.locations = locations


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class ScriptController:
    """
    Keeps a ScriptResource in sync with the remote monitor script.

    Example:
        controller = ScriptController(client, secret=b"...")
        resource = ScriptResource(monitor_id="abc123", text="GET https://example.com")
        controller.create(resource)
    """

    def __init__(
        self,
        service: SyntheticsService,
        secret: bytes,
        *,
        verify_on_read: bool = False,
        bind_location_name: bool = False,
    ) -> None:
        self._service = service
        self._secret = secret
        self._verify_on_read = verify_on_read
        self._bind_location_name = bind_location_name

    def _build(self, resource: ScriptResource) -> MonitorScript:
        return assemble(
            resource.text,
            resource.locations,
            self._secret,
            bind_location_name=self._bind_location_name,
        )

    def _require_present(self, resource: ScriptResource, action: str) -> None:
        if not resource.present:
            raise ValueError(f"Cannot {action} a monitor script that is not in state (empty id).")

    def _submit(self, monitor_id: str, script: MonitorScript, action: str) -> None:
        try:
            self._service.update_monitor_script(monitor_id, script)
        except SyntheticsAPIError as exc:
            logger.error("%s monitor script %s failed: %s", action, monitor_id, exc)
            raise

    # ------------------------------------------------------------------
    # Lifecycle verbs
    # ------------------------------------------------------------------

    def create(self, resource: ScriptResource) -> ScriptResource:
        """Attach (or overwrite) the script on `resource.monitor_id`, then read it back."""
        monitor_id = resource.monitor_id
        if not monitor_id:
            raise ValueError("monitor_id is required to create a monitor script.")
        if not resource.text:
            raise ValueError("text is required to create a monitor script.")
        logger.info("Creating monitor script %s", monitor_id)

        self._submit(monitor_id, self._build(resource), "Creating")

        resource.id = monitor_id
        return self.read(resource)

    def read(self, resource: ScriptResource) -> ScriptResource:
        """
        Refresh `text` and `locations` from the remote script.

        A monitor the service does not know clears the resource id instead of
        raising. Every other error propagates with the resource unchanged.
        """
        logger.info("Reading monitor script %s", resource.id)

        try:
            remote = self._service.get_monitor_script(resource.id)
        except NotFoundError:
            logger.warning("Monitor script %s not found, removing from state", resource.id)
            resource.id = ""
            return resource
        except SyntheticsAPIError as exc:
            logger.error("Reading monitor script %s failed: %s", resource.id, exc)
            raise

        if self._verify_on_read:
            mismatched = verify_locations(remote, self._secret, bind_location_name=self._bind_location_name)
            if mismatched:
                logger.error("Monitor script %s failed integrity check: %s", resource.id, mismatched)
                raise TamperDetectedError(resource.id, mismatched)

        fields = reconcile(remote)
        resource.locations = fields["locations"]
        resource.text = fields["text"]
        return resource

    def update(self, resource: ScriptResource) -> ScriptResource:
        """Replace the whole script under the existing id, then read it back."""
        self._require_present(resource, "update")
        if not resource.text:
            raise ValueError("text is required to update a monitor script.")
        logger.info("Updating monitor script %s", resource.id)

        self._submit(resource.id, self._build(resource), "Updating")

        return self.read(resource)

    def delete(self, resource: ScriptResource) -> ScriptResource:
        """Blank the remote script. The service has no delete verb for scripts."""
        self._require_present(resource, "delete")
        logger.info("Deleting monitor script %s", resource.id)

        self._submit(resource.id, blank_script(), "Deleting")

        resource.id = ""
        return resource

    def import_resource(self, resource_id: str) -> ScriptResource:
        """Adopt an existing monitor's script into state by monitor id."""
        if not resource_id:
            raise ValueError("An id is required to import a monitor script.")
        logger.info("Importing monitor script %s", resource_id)

        resource = ScriptResource(id=resource_id, monitor_id=resource_id)
        return self.read(resource)
