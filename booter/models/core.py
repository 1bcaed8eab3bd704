"""Core pydantic models."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class InventoryRecord(BaseModel):
    """Common configuration for the records returned by NAPI and CNAPI.

    The services return more attributes than the ones declared by each model. They are
    kept as extra attributes since the boot-time network config forwards them to the
    compute node as they are.
    """

    model_config = ConfigDict(extra="allow")

    def to_dict(self) -> dict[str, Any]:
        """Return the attributes received from the service plus the ones set later."""
        return self.model_dump(mode="json", exclude_unset=True)
