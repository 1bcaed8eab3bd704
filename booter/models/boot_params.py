"""Pydantic model of the boot parameters stored in CNAPI."""

from typing import Annotated, Any

from pydantic import Field

from booter.models.core import InventoryRecord


class BootParams(InventoryRecord):
    """Parameters needed to boot a compute node.

    CNAPI returns other fields (platform, kernel_flags, boot_modules...). They are
    kept untouched as extra attributes.

    Attributes:
    ----------
        kernel_args (dict of {str: Any}): Arguments passed to the kernel. Includes the
            "<tag>_nic" mac bindings.
        ip (str | None): IP of the boot nic.
        netmask (str | None): Netmask of the boot nic.
    """

    kernel_args: Annotated[
        dict[str, Any],
        Field(default_factory=dict, description="Kernel arguments."),
    ]
    ip: Annotated[str | None, Field(default=None, description="Boot nic IP.")]
    netmask: Annotated[
        str | None, Field(default=None, description="Boot nic netmask.")
    ]
