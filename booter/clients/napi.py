"""NAPI client: nics, aggregations and nic tags."""

from logging import Logger

from fastapi import status

from booter.clients.core import InventoryClient
from booter.config import Settings
from booter.models.nics import Aggregation, Nic, NicTag


def mac_to_path(mac: str) -> str:
    """NAPI identifies nics by their MAC address without colons."""
    return mac.replace(":", "").lower()


class NapiClient(InventoryClient):
    """Class with the NAPI operations needed to boot a compute node."""

    service_name = "NAPI"

    def get_nic(self, mac: str) -> Nic:
        """Retrieve the nic with the given MAC address."""
        self.logger.info("Looking for nic=%s", mac)
        path = f"/nics/{mac_to_path(mac)}"
        return self.to_record(Nic, self.request("get", path), path)

    def update_nic(self, mac: str, **params) -> Nic:
        """Update the nic with the given MAC address."""
        self.logger.info("Updating nic=%s", mac)
        path = f"/nics/{mac_to_path(mac)}"
        return self.to_record(Nic, self.request("put", path, data=params), path)

    def provision_nic(self, network: str, **params) -> Nic:
        """Create a nic on the given network. NAPI assigns it an IP."""
        self.logger.info("Provisioning nic on network=%s", network)
        path = f"/networks/{network}/nics"
        body = self.request(
            "post",
            path,
            expected=(status.HTTP_200_OK, status.HTTP_201_CREATED),
            data=params,
        )
        return self.to_record(Nic, body, path)

    def list_nics(self, **filters) -> list[Nic]:
        """Retrieve the nics matching the given filters."""
        self.logger.info("Looking for nics matching %s", filters)
        body = self.request("get", "/nics", params=filters)
        return self.to_records(Nic, body, "/nics")

    def list_aggrs(self, **filters) -> list[Aggregation]:
        """Retrieve the aggregations matching the given filters."""
        self.logger.info("Looking for aggregations matching %s", filters)
        body = self.request("get", "/aggregations", params=filters)
        return self.to_records(Aggregation, body, "/aggregations")

    def list_nic_tags(self) -> list[NicTag]:
        """Retrieve all the nic tags of the datacenter."""
        self.logger.info("Looking for all nic tags")
        return self.to_records(NicTag, self.request("get", "/nic_tags"), "/nic_tags")


def create_napi_client(settings: Settings, *, logger: Logger) -> NapiClient:
    """Create a NAPI client from the application settings."""
    return NapiClient(
        url=settings.NAPI_URL,
        username=settings.NAPI_USERNAME,
        password=settings.NAPI_PASSWORD,
        timeout=settings.INVENTORY_TIMEOUT,
        logger=logger,
    )
