"""Pydantic models of the network interfaces, aggregations and nic tags in NAPI."""

from typing import Annotated

from pydantic import Field

from booter.models.core import InventoryRecord


class Nic(InventoryRecord):
    """Model with the NAPI nic attributes used to boot a compute node.

    Attributes:
    ----------
        mac (str | None): MAC address. Unique key of the nic.
        ip (str | None): IP address assigned to the nic.
        netmask (str | None): Netmask of the nic's network.
        nic_tag (str | None): Nic tag of the nic's network.
        nic_tags_provided (list of str | None): Nic tags the nic is able to carry.
        belongs_to_uuid (str | None): UUID of the owning server.
        belongs_to_type (str | None): Type of the owner (server, zone, other).
        owner_uuid (str | None): UUID of the nic owner.
        routes (dict of {str: str} | None): Routes of the nic's network.
        resolvers (list of str | None): DNS resolvers of the nic's network.
        underlay (bool | None): The nic carries overlay traffic.
        overlay_nic_tags_provided (list of str | None): Overlay nic tags provided.
    """

    mac: Annotated[str | None, Field(default=None, description="MAC address.")]
    ip: Annotated[str | None, Field(default=None, description="IP address.")]
    netmask: Annotated[str | None, Field(default=None, description="Netmask.")]
    nic_tag: Annotated[
        str | None, Field(default=None, description="Nic tag of the nic's network.")
    ]
    nic_tags_provided: Annotated[
        list[str] | None,
        Field(default=None, description="Nic tags the physical nic is able to carry."),
    ]
    belongs_to_uuid: Annotated[
        str | None, Field(default=None, description="UUID of the owning server.")
    ]
    belongs_to_type: Annotated[
        str | None, Field(default=None, description="Type of the owning entity.")
    ]
    owner_uuid: Annotated[
        str | None, Field(default=None, description="UUID of the nic owner.")
    ]
    routes: Annotated[
        dict[str, str] | None,
        Field(default=None, description="Routes, destination to gateway."),
    ]
    resolvers: Annotated[
        list[str] | None, Field(default=None, description="DNS resolvers.")
    ]
    underlay: Annotated[
        bool | None,
        Field(default=None, description="Nic used as underlay for overlay networks."),
    ]
    overlay_nic_tags_provided: Annotated[
        list[str] | None,
        Field(default=None, description="Overlay nic tags provided by this nic."),
    ]


class Aggregation(InventoryRecord):
    """Model of a link aggregation of some of the physical nics of a server.

    Attributes:
    ----------
        name (str): Aggregation name. It takes the place of the mac for nic tags.
        macs (list of str): MAC addresses of the aggregated nics.
        nic_tags_provided (list of str | None): Nic tags the aggregation carries.
        lacp_mode (str | None): LACP mode.
        belongs_to_uuid (str | None): UUID of the owning server.
    """

    name: Annotated[str, Field(description="Aggregation name.")]
    macs: Annotated[
        list[str], Field(default_factory=list, description="Aggregated MACs.")
    ]
    nic_tags_provided: Annotated[
        list[str] | None,
        Field(default=None, description="Nic tags the aggregation is able to carry."),
    ]
    lacp_mode: Annotated[str | None, Field(default=None, description="LACP mode.")]
    belongs_to_uuid: Annotated[
        str | None, Field(default=None, description="UUID of the owning server.")
    ]


class NicTag(InventoryRecord):
    """A nic tag and the physical nic (or aggregation) carrying it on a server."""

    name: Annotated[str, Field(description="Nic tag name.")]
    mac: Annotated[
        str | None,
        Field(default=None, description="MAC or aggregation carrying the tag."),
    ]
