"""Generate and write the boot-time network configuration of a compute node."""

import hashlib
from logging import Logger
from pathlib import Path

from booter.json_file import write_json_file
from booter.models.net_config import NetConfig, OverlayConfig
from booter.models.nics import Aggregation, Nic, NicTag

NET_CONF_FILE = "networking.json"
HASH_SUFFIX = ".hash"
NIC_TAG_RULE = (
    "-e vxlan -s svp -p svp/host={portolan} -p svp/underlay_ip={ip} "
    "-p vxlan/listen_ip={ip} -p mtu={mtu}"
)


def is_underlay_nic(overlay: OverlayConfig | None, nic: Nic) -> bool:
    """Return True if the nic carries the overlay networks traffic."""
    return bool(
        overlay is not None
        and overlay.enabled
        and overlay.portolan
        and nic.underlay
        and overlay.underlayNicTag
        and overlay.underlayNicTag == nic.nic_tag
    )


def assign_tag(nictags: list[NicTag], tag_names: list[str] | None, mac: str) -> None:
    """Set the given mac on every nic tag whose name is in tag_names."""
    for tag_name in tag_names or []:
        for tag in nictags:
            if tag.name == tag_name:
                tag.mac = mac


def generate_net_config(
    *,
    admin_nic: Nic | None,
    nics: list[Nic] | None = None,
    aggrs: list[Aggregation] | None = None,
    nictags: list[NicTag] | None = None,
    overlay: OverlayConfig | None = None,
    dns_domain: str | None = None,
    hostname: str | None = None,
    datacenter_name: str | None = None,
    logger: Logger,
) -> NetConfig | None:
    """Merge the server nics, aggregations and nic tags in a network config.

    The admin nic goes first: it must be the first configured vnic and its resolvers
    must be tried first by the compute node services. Aggregations are processed last
    so that they take precedence over physical nics providing the same nic tag.

    Input records are not modified.

    Args:
        admin_nic (Nic | None): nic on the admin network.
        nics (list of Nic | None): other nics of the server.
        aggrs (list of Aggregation | None): link aggregations of the server.
        nictags (list of NicTag | None): nic tags of the server.
        overlay (OverlayConfig | None): overlay networking configuration.
        dns_domain (str | None): DNS domain.
        hostname (str | None): server hostname.
        datacenter_name (str | None): datacenter name.
        logger (Logger): Logger instance.

    Returns:
        NetConfig | None: the network configuration. None if there is no admin nic.

    """
    if admin_nic is None:
        logger.warning("No admin nic: skipping network config generation")
        return None

    logger.debug(
        "Generating network config: admin_nic=%s, nics=%s, aggrs=%s, nictags=%s, "
        "overlay=%s, dns_domain=%s, hostname=%s, datacenter_name=%s",
        admin_nic,
        nics,
        aggrs,
        nictags,
        overlay,
        dns_domain,
        hostname,
        datacenter_name,
    )

    tags = [tag.model_copy() for tag in nictags or []]
    resolvers: list[str] = []
    routes: dict[str, str] = {}
    vnics: list[Nic] = []
    nictag_rules: dict[str, str] = {}
    seen_macs: set[str] = set()

    for nic in [admin_nic, *(nics or [])]:
        if nic.mac is None or nic.mac in seen_macs:
            continue
        seen_macs.add(nic.mac)

        routes.update(nic.routes or {})
        assign_tag(tags, nic.nic_tags_provided, nic.mac)

        if nic.ip and nic.netmask:
            update = {}
            if is_underlay_nic(overlay, nic):
                nictag_rules[overlay.overlayNicTag] = NIC_TAG_RULE.format(
                    portolan=overlay.portolan,
                    ip=nic.ip,
                    mtu=overlay.defaultOverlayMTU,
                )
                update["overlay_nic_tags_provided"] = [overlay.overlayNicTag]
            vnics.append(nic.model_copy(update=update))

        for resolver in nic.resolvers or []:
            if resolver not in resolvers:
                resolvers.append(resolver)

    for aggr in aggrs or []:
        assign_tag(tags, aggr.nic_tags_provided, aggr.name)

    for tag in tags:
        if tag.name == "admin" or tag.name == admin_nic.nic_tag:
            # Server that just booted for the first time: fall back to the admin nic
            if len(vnics) == 1 and not tag.mac:
                tag.mac = admin_nic.mac
            break

    conf = {
        "nictags": tags,
        "admin_tag": admin_nic.nic_tag,
        "resolvers": resolvers,
        "routes": routes,
        "vnics": vnics,
    }
    if dns_domain:
        conf["dns_domain"] = dns_domain
    if hostname:
        conf["hostname"] = hostname
    if datacenter_name:
        conf["datacenter_name"] = datacenter_name
    if nictag_rules:
        conf["nictag_rules"] = nictag_rules
    if aggrs is not None:
        conf["aggregations"] = [aggr.model_copy() for aggr in aggrs]

    return NetConfig(**conf)


def has_admin_tag(conf: NetConfig, admin_pool_nic_tags: list[str]) -> bool:
    """Return True if one of the nic tags is the admin one or in the admin pool."""
    for tag in conf.nictags:
        if tag.name == "admin" or tag.name in admin_pool_nic_tags:
            return True
    return False


def write_net_config(
    *,
    bootfs_dir: str | Path,
    admin_pool_nic_tags: list[str] | None = None,
    logger: Logger,
    **kwargs,
) -> NetConfig | None:
    """Generate the network config and write it, with its hash, in bootfs_dir.

    The hash file contains the SHA-1 hex digest of the network config file content.
    Nothing is written when there is no admin nic or when no nic tag is an admin one.

    Args:
        bootfs_dir (str | Path): boot file system directory of the server.
        admin_pool_nic_tags (list of str | None): nic tags present in the admin
            network pool.
        logger (Logger): Logger instance.
        kwargs: arguments forwarded to generate_net_config.

    Returns:
        NetConfig | None: the written configuration. None when nothing is written.

    """
    conf = generate_net_config(logger=logger, **kwargs)
    if conf is None:
        return None

    if not has_admin_tag(conf, admin_pool_nic_tags or []):
        logger.error(
            "No admin nic tag found: not writing boot-time file. admin_nic=%s, conf=%s",
            kwargs.get("admin_nic"),
            conf,
        )
        return None

    data = write_json_file(bootfs_dir, NET_CONF_FILE, conf.to_dict(), logger=logger)

    digest = hashlib.sha1(data).hexdigest()
    hash_name = Path(bootfs_dir) / f"{NET_CONF_FILE}{HASH_SUFFIX}"
    logger.info("Writing networking hash: file=%s, sha1=%s", hash_name, digest)
    hash_name.write_text(digest)
    return conf
