"""Application settings."""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from booter.models.net_config import OverlayConfig


def invalid_empty(v: str) -> str:
    """An empty string is not a valid input.

    Args:
        v (str): input string.

    Returns:
        str: the input string

    """
    if v == "":
        raise ValueError("Empty string is not a valid value")
    return v


class Settings(BaseSettings):
    """Settings for the application."""

    APP_NAME: Annotated[str, Field(default="Booter", description="Application name.")]
    NAPI_URL: Annotated[
        AnyHttpUrl,
        Field(default="http://localhost:8080", description="NAPI base URL."),
    ]
    NAPI_USERNAME: Annotated[
        str,
        Field(default="admin", description="Username used to authenticate on NAPI."),
        AfterValidator(invalid_empty),
    ]
    NAPI_PASSWORD: Annotated[
        str,
        Field(default="admin", description="Password used to authenticate on NAPI."),
        AfterValidator(invalid_empty),
    ]
    CNAPI_URL: Annotated[
        AnyHttpUrl,
        Field(default="http://localhost:8081", description="CNAPI base URL."),
    ]
    CNAPI_USERNAME: Annotated[
        str,
        Field(default="admin", description="Username used to authenticate on CNAPI."),
        AfterValidator(invalid_empty),
    ]
    CNAPI_PASSWORD: Annotated[
        str,
        Field(default="admin", description="Password used to authenticate on CNAPI."),
        AfterValidator(invalid_empty),
    ]
    INVENTORY_TIMEOUT: Annotated[
        int,
        Field(
            default=10,
            gt=0,
            description="Timeout [s] for the HTTP requests made to NAPI and CNAPI.",
        ),
    ]
    ADMIN_UUID: Annotated[
        str,
        Field(
            default="00000000-0000-0000-0000-000000000000",
            description="Owner of the nics not yet belonging to a compute node.",
        ),
    ]
    ADMIN_NETWORK: Annotated[
        str,
        Field(
            default="admin",
            description="Network (or network pool) used to provision admin nics.",
        ),
    ]
    ADMIN_POOL_NIC_TAGS: Annotated[
        list[str],
        Field(
            default_factory=list,
            description="Nic tags present in the admin network pool. Any of them "
            "counts as an admin nic tag.",
        ),
    ]
    TFTP_ROOT: Annotated[
        Path,
        Field(
            default="/tftpboot",
            description="Root of the TFTP tree. Boot files are written under "
            "<TFTP_ROOT>/bootfs/<mac>.",
        ),
    ]
    DNS_DOMAIN: Annotated[
        str | None, Field(default=None, description="DNS domain of the datacenter.")
    ]
    DATACENTER_NAME: Annotated[
        str | None, Field(default=None, description="Name of the datacenter.")
    ]
    OVERLAY_ENABLED: Annotated[
        bool, Field(default=False, description="Enable overlay networking.")
    ]
    OVERLAY_PORTOLAN: Annotated[
        str | None,
        Field(default=None, description="Portolan service address (host or IP)."),
    ]
    OVERLAY_UNDERLAY_NIC_TAG: Annotated[
        str | None,
        Field(default=None, description="Nic tag carrying the underlay traffic."),
    ]
    OVERLAY_NIC_TAG: Annotated[
        str,
        Field(
            default="sdc_overlay",
            description="Nic tag given to overlay networks built on the underlay.",
        ),
    ]
    OVERLAY_DEFAULT_MTU: Annotated[
        int,
        Field(default=1400, gt=0, description="Default MTU of overlay networks."),
    ]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def overlay(self) -> OverlayConfig:
        """Overlay configuration used when generating the network config."""
        return OverlayConfig(
            enabled=self.OVERLAY_ENABLED,
            portolan=self.OVERLAY_PORTOLAN,
            underlayNicTag=self.OVERLAY_UNDERLAY_NIC_TAG,
            overlayNicTag=self.OVERLAY_NIC_TAG,
            defaultOverlayMTU=self.OVERLAY_DEFAULT_MTU,
        )


@lru_cache
def get_settings() -> Settings:
    """Retrieve cached settings.

    Returns:
        Settings: Cached settings value.

    """
    return Settings()
