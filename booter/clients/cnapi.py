"""CNAPI client: compute node boot parameters."""

from logging import Logger

from booter.clients.core import InventoryClient
from booter.config import Settings
from booter.models.boot_params import BootParams


class CnapiClient(InventoryClient):
    """Class with the CNAPI operations needed to boot a compute node."""

    service_name = "CNAPI"

    def get_boot_params(self, uuid: str) -> BootParams | None:
        """Retrieve the boot parameters of a server.

        Use "default" as uuid to retrieve the datacenter default boot parameters.

        Returns:
            BootParams | None: the boot parameters. None if CNAPI returned an empty
                object.

        """
        self.logger.info("Looking for boot params of server=%s", uuid)
        path = f"/boot/{uuid}"
        body = self.request("get", path)
        if not body:
            return None
        return self.to_record(BootParams, body, path)


def create_cnapi_client(settings: Settings, *, logger: Logger) -> CnapiClient:
    """Create a CNAPI client from the application settings."""
    return CnapiClient(
        url=settings.CNAPI_URL,
        username=settings.CNAPI_USERNAME,
        password=settings.CNAPI_PASSWORD,
        timeout=settings.INVENTORY_TIMEOUT,
        logger=logger,
    )
