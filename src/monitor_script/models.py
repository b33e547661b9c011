# models.py
# Data contracts for the synthetics monitor script resource.
# No business logic lives here, only schema and validation.

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScriptLocation(BaseModel):
    """A named execution location and the authentication tag attached to it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Execution location identifier.")
    hmac: str = Field(default="", description="Hex-encoded HMAC-SHA256 tag.")


class MonitorScript(BaseModel):
    """Remote-facing script payload. Built per call, never stored."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., alias="scriptText", description="Canonical (base64) script body.")
    locations: list[ScriptLocation] = Field(default_factory=list, alias="scriptLocations")

    @field_validator("locations", mode="before")
    @classmethod
    def _null_locations(cls, value):
        # The API sends null when a script has no locations.
        return [] if value is None else value


class ScriptResource(BaseModel):
    """
    Declarative state of one script resource.

    An empty `id` means the resource is absent. The id always equals the
    monitor id once the resource is present (one script per monitor).
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = ""
    monitor_id: str = Field(default="", description="Monitor the script is attached to.")
    text: str = Field(default="", description="Plaintext script body.")
    locations: list[ScriptLocation] = Field(default_factory=list, max_length=1)

    @property
    def present(self) -> bool:
        return bool(self.id)
