"""Boot files generation script."""

import json
from logging import Logger
from pathlib import Path

from booter.bootparams import BootParamsResolver
from booter.clients.cnapi import create_cnapi_client
from booter.clients.napi import NapiClient, create_napi_client, mac_to_path
from booter.config import Settings, get_settings
from booter.exceptions import BooterError, InventoryError, ResolutionError
from booter.logger import create_logger
from booter.models.nics import Aggregation
from booter.net_file import write_net_config
from booter.parser import parser


def bootfs_dir(settings: Settings, mac: str) -> Path:
    """Directory with the boot files served to the nic with the given mac."""
    return Path(settings.TFTP_ROOT) / "bootfs" / mac_to_path(mac)


def get_server_aggrs(
    napi: NapiClient, uuid: str | None, *, logger: Logger
) -> list[Aggregation] | None:
    """Retrieve the aggregations of the server. None for unassigned nics."""
    if uuid is None:
        return None
    try:
        return napi.list_aggrs(belongs_to_uuid=uuid)
    except InventoryError as e:
        msg = f"Error getting aggregations for {uuid} from NAPI"
        logger.error(msg)
        raise ResolutionError(msg, uuid=uuid) from e


def main(mac: str, log_level: str) -> None:
    """Main function.

    Resolve the boot params of the nic with the given mac, contacting NAPI and CNAPI.
    Then retrieve the server aggregations and the datacenter nic tags and write the
    boot-time network configuration in the server boot file system.

    Print the boot params to stdout.
    """
    settings = get_settings()
    logger = create_logger(settings.APP_NAME, level=log_level)

    napi = create_napi_client(settings, logger=logger)
    cnapi = create_cnapi_client(settings, logger=logger)
    resolver = BootParamsResolver(
        napi=napi, cnapi=cnapi, settings=settings, logger=logger
    )

    try:
        params = resolver.resolve(mac)
        aggrs = get_server_aggrs(napi, resolver.server_uuid, logger=logger)
        try:
            nictags = napi.list_nic_tags()
        except InventoryError as e:
            msg = "Error getting nic tags from NAPI"
            logger.error(msg)
            raise ResolutionError(msg, mac=mac) from e

        write_net_config(
            bootfs_dir=bootfs_dir(settings, mac),
            admin_pool_nic_tags=settings.ADMIN_POOL_NIC_TAGS,
            admin_nic=resolver.boot_nic,
            nics=resolver.nics,
            aggrs=aggrs,
            nictags=nictags,
            overlay=settings.overlay,
            dns_domain=settings.DNS_DOMAIN,
            hostname=params.kernel_args.get("hostname"),
            datacenter_name=settings.DATACENTER_NAME,
            logger=logger,
        )
    except (BooterError, OSError) as e:
        logger.error(e)
        logger.error("Boot files for mac=%s not generated.", mac)
        exit(1)

    print(json.dumps(params.to_dict(), indent=2))


def run() -> None:
    """Console script entry point."""
    args = parser.parse_args()
    main(args.mac, args.loglevel.upper())


if __name__ == "__main__":
    run()
