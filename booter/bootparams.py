"""Retrieve from NAPI and CNAPI the parameters needed to boot a compute node."""

from logging import Logger

from booter.clients.cnapi import CnapiClient
from booter.clients.napi import NapiClient
from booter.config import Settings
from booter.exceptions import (
    InventoryError,
    MissingAddressError,
    NotFoundError,
    ResolutionError,
)
from booter.models.boot_params import BootParams
from booter.models.nics import Nic

DEFAULT_BOOT_PARAMS = "default"


class BootParamsResolver:
    """Resolve the boot parameters of the nic a compute node is booting from.

    The stages run in order, each one using what the previous ones found:

    - look for the nic in NAPI;
    - if it has no IP, ask NAPI to give it one on the admin network;
    - if it does not exist, provision it on the admin network;
    - retrieve the boot params of the owning server from CNAPI, falling back to the
      default ones for unknown servers;
    - retrieve the other nics of the owning server;
    - merge everything in the returned boot params.

    An instance serves a single resolution. After `resolve` the boot nic and the
    server nics are available as `boot_nic` and `nics`.
    """

    def __init__(
        self,
        *,
        napi: NapiClient,
        cnapi: CnapiClient,
        settings: Settings,
        logger: Logger,
    ) -> None:
        self.napi = napi
        self.cnapi = cnapi
        self.admin_uuid = settings.ADMIN_UUID
        self.admin_network = settings.ADMIN_NETWORK
        self.logger = logger

        self.mac: str | None = None
        self.boot_nic: Nic | None = None
        self.nics: list[Nic] = []

    @property
    def server_uuid(self) -> str | None:
        """UUID of the server owning the boot nic. None for unassigned nics."""
        if self.boot_nic is None or self.boot_nic.belongs_to_uuid == self.admin_uuid:
            return None
        return self.boot_nic.belongs_to_uuid

    def resolve(self, mac: str) -> BootParams:
        """Return the boot params for the nic with the given mac.

        Raises:
            ResolutionError when NAPI or CNAPI calls fail.
            MissingAddressError when the boot nic has no IP or netmask.

        """
        self.mac = mac
        self.boot_nic = self.get_nic()
        if self.boot_nic is None:
            self.boot_nic = self.provision_nic()
        elif not self.boot_nic.ip:
            self.boot_nic = self.provision_ip()

        params = None
        if self.server_uuid is not None:
            params = self.get_server_boot_params(self.server_uuid)
        if params is None:
            params = self.get_default_boot_params()

        siblings = []
        if self.server_uuid is not None:
            siblings = self.get_server_nics(self.server_uuid)
        self.nics = unique_nics([self.boot_nic, *siblings])

        return self.assemble(params)

    def get_nic(self) -> Nic | None:
        """Retrieve the nic from NAPI. None if NAPI does not know it."""
        try:
            nic = self.napi.get_nic(self.mac)
        except NotFoundError:
            self.logger.debug("Did not find nic=%s in NAPI", self.mac)
            return None
        except InventoryError as e:
            msg = f"Error getting nic {self.mac} from NAPI"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac) from e
        self.logger.debug("Got nic from NAPI: %s", nic)
        return nic

    def provision_ip(self) -> Nic:
        """Give an admin network IP to a nic without one."""
        self.logger.debug("Updating nic=%s to add an IP", self.mac)
        try:
            nic = self.napi.update_nic(self.mac, network_uuid=self.admin_network)
        except InventoryError as e:
            msg = f"Error adding IP to nic {self.mac} on NAPI"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac) from e
        self.logger.debug("Updated nic=%s with IP=%s in NAPI", self.mac, nic.ip)
        return nic

    def provision_nic(self) -> Nic:
        """Create the nic on the admin network. NAPI gives it an IP."""
        try:
            nic = self.napi.provision_nic(
                self.admin_network,
                owner_uuid=self.admin_uuid,
                belongs_to_uuid=self.admin_uuid,
                belongs_to_type="other",
                mac=self.mac,
                nic_tags_provided=["admin"],
            )
        except InventoryError as e:
            msg = f"Error provisioning admin nic {self.mac} on NAPI"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac) from e
        self.logger.debug("Got provisioned nic from NAPI: %s", nic)
        return nic

    def get_server_boot_params(self, uuid: str) -> BootParams | None:
        """Retrieve the server boot params. None if CNAPI has none for it."""
        try:
            params = self.cnapi.get_boot_params(uuid)
        except NotFoundError:
            self.logger.warning(
                "Did not find bootparams for %s in CNAPI: continuing anyway", uuid
            )
            return None
        except InventoryError as e:
            msg = f"Error getting {uuid} bootparams from CNAPI"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac, uuid=uuid) from e

        if params is None:
            self.logger.warning(
                "Empty bootparams for %s: getting default bootparams instead", uuid
            )
            return None
        self.logger.debug("Got bootparams from CNAPI: %s", params)
        return params

    def get_default_boot_params(self) -> BootParams:
        """Retrieve the datacenter default boot params. There is no further fallback."""
        try:
            params = self.cnapi.get_boot_params(DEFAULT_BOOT_PARAMS)
        except InventoryError as e:
            msg = "Error getting default bootparams from CNAPI"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac, uuid=DEFAULT_BOOT_PARAMS) from e

        if params is None:
            msg = "CNAPI returned empty default bootparams"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac, uuid=DEFAULT_BOOT_PARAMS)
        self.logger.debug("Got default bootparams from CNAPI: %s", params)
        return params

    def get_server_nics(self, uuid: str) -> list[Nic]:
        """Retrieve all the nics belonging to the server."""
        try:
            nics = self.napi.list_nics(belongs_to_uuid=uuid)
        except InventoryError as e:
            msg = f"Error getting nics for {uuid} from NAPI"
            self.logger.error(msg)
            raise ResolutionError(msg, mac=self.mac, uuid=uuid) from e
        self.logger.debug("Got nics for %s from NAPI: %s", uuid, nics)
        return nics

    def assemble(self, params: BootParams) -> BootParams:
        """Add the boot nic address and the "<tag>_nic" kernel args to the params.

        Kernel args already defined in CNAPI are kept: they are reported as overridden.
        """
        if not self.boot_nic.ip or not self.boot_nic.netmask:
            msg = f"Boot nic {self.mac} has no IP or netmask"
            self.logger.error("%s: %s", msg, self.boot_nic)
            raise MissingAddressError(msg, mac=self.mac, uuid=self.server_uuid)

        kernel_args = dict(params.kernel_args)
        overridden = set()
        if "admin_nic" in kernel_args:
            overridden.add("admin_nic")

        for nic in self.nics:
            if nic.nic_tags_provided is None:
                continue
            for tag in nic.nic_tags_provided:
                key = f"{tag}_nic"
                if key in kernel_args:
                    overridden.add(key)
                else:
                    kernel_args[key] = nic.mac

        # First boot: NAPI does not know which nic is the admin one yet
        if "admin_nic" not in kernel_args:
            kernel_args["admin_nic"] = self.boot_nic.mac

        if overridden:
            self.logger.warning("kernel_args: overriding: %s", sorted(overridden))

        params = params.model_copy(
            update={
                "ip": self.boot_nic.ip,
                "netmask": self.boot_nic.netmask,
                "kernel_args": kernel_args,
            }
        )
        self.logger.info("Boot params generated for mac=%s: %s", self.mac, params)
        return params


def unique_nics(nics: list[Nic]) -> list[Nic]:
    """Drop nics without a mac and the ones whose mac was already seen."""
    seen: set[str] = set()
    result = []
    for nic in nics:
        if nic.mac is None or nic.mac in seen:
            continue
        seen.add(nic.mac)
        result.append(nic)
    return result


def get_boot_params(
    mac: str,
    *,
    napi: NapiClient,
    cnapi: CnapiClient,
    settings: Settings,
    logger: Logger,
) -> BootParams:
    """Resolve the boot params of the given mac with a one-shot resolver."""
    resolver = BootParamsResolver(
        napi=napi, cnapi=cnapi, settings=settings, logger=logger
    )
    return resolver.resolve(mac)
