"""Pydantic models of the boot-time network configuration."""

import json
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from booter.models.nics import Aggregation, Nic, NicTag


class OverlayConfig(BaseModel):
    """Overlay networking configuration.

    Attribute names match the ones used in the datacenter configuration.
    """

    model_config = ConfigDict(frozen=True)

    enabled: Annotated[bool, Field(default=False, description="Overlay enabled.")]
    portolan: Annotated[
        str | None, Field(default=None, description="Portolan service address.")
    ]
    underlayNicTag: Annotated[
        str | None, Field(default=None, description="Underlay nic tag name.")
    ]
    overlayNicTag: Annotated[
        str, Field(default="sdc_overlay", description="Overlay nic tag name.")
    ]
    defaultOverlayMTU: Annotated[
        int, Field(default=1400, gt=0, description="Default overlay MTU.")
    ]


class NetConfig(BaseModel):
    """Boot-time network configuration of a compute node (networking.json).

    Attributes:
    ----------
        nictags (list of NicTag): Nic tags with the mac carrying each of them.
        admin_tag (str | None): Nic tag of the admin nic.
        resolvers (list of str): DNS resolvers, admin ones first.
        routes (dict of {str: str}): Routes of all the nics.
        vnics (list of Nic): Nics with an IP to configure at boot.
        aggregations (list of Aggregation | None): Link aggregations.
        nictag_rules (dict of {str: str} | None): Overlay nic tag rules.
        dns_domain (str | None): DNS domain.
        hostname (str | None): Server hostname.
        datacenter_name (str | None): Datacenter name.
    """

    model_config = ConfigDict(frozen=True)

    nictags: Annotated[list[NicTag], Field(default_factory=list)]
    admin_tag: Annotated[str | None, Field(default=None)]
    resolvers: Annotated[list[str], Field(default_factory=list)]
    routes: Annotated[dict[str, str], Field(default_factory=dict)]
    vnics: Annotated[list[Nic], Field(default_factory=list)]
    aggregations: Annotated[list[Aggregation] | None, Field(default=None)]
    nictag_rules: Annotated[dict[str, str] | None, Field(default=None)]
    dns_domain: Annotated[str | None, Field(default=None)]
    hostname: Annotated[str | None, Field(default=None)]
    datacenter_name: Annotated[str | None, Field(default=None)]

    def to_dict(self) -> dict[str, Any]:
        """Return the fields set on creation, nested records included."""
        return self.model_dump(mode="json", exclude_unset=True)

    def to_json(self) -> str:
        """Serialize the configuration as written to networking.json."""
        return json.dumps(self.to_dict(), indent=2) + "\n"
