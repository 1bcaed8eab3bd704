import hashlib
import json
import os
from logging import Logger
from pathlib import Path

from pytest_cases import parametrize, parametrize_with_cases

from booter.json_file import write_json_file
from booter.models.net_config import OverlayConfig
from booter.models.nics import Aggregation, Nic, NicTag
from booter.net_file import (
    generate_net_config,
    is_underlay_nic,
    write_net_config,
)
from tests.utils import nic_dict, random_ip, random_lower_string, random_mac


def overlay_config(**kwargs) -> OverlayConfig:
    return OverlayConfig(
        **{
            "enabled": True,
            "portolan": "portolan.example.com",
            "underlayNicTag": "sdc_underlay",
            "overlayNicTag": "sdc_overlay",
            "defaultOverlayMTU": 1400,
            **kwargs,
        }
    )


class CaseNotUnderlay:
    def case_overlay_disabled(self) -> tuple[OverlayConfig | None, Nic]:
        return overlay_config(enabled=False), Nic(
            **nic_dict(nic_tag="sdc_underlay", underlay=True)
        )

    def case_no_overlay(self) -> tuple[OverlayConfig | None, Nic]:
        return None, Nic(**nic_dict(nic_tag="sdc_underlay", underlay=True))

    def case_no_portolan(self) -> tuple[OverlayConfig | None, Nic]:
        return overlay_config(portolan=None), Nic(
            **nic_dict(nic_tag="sdc_underlay", underlay=True)
        )

    def case_no_underlay_tag(self) -> tuple[OverlayConfig | None, Nic]:
        return overlay_config(underlayNicTag=None), Nic(
            **nic_dict(nic_tag="sdc_underlay", underlay=True)
        )

    def case_other_nic_tag(self) -> tuple[OverlayConfig | None, Nic]:
        return overlay_config(), Nic(**nic_dict(nic_tag="external", underlay=True))

    @parametrize(underlay=[False, None])
    def case_nic_not_underlay(
        self, underlay: bool | None
    ) -> tuple[OverlayConfig | None, Nic]:
        return overlay_config(), Nic(
            **nic_dict(nic_tag="sdc_underlay", underlay=underlay)
        )


def test_no_admin_nic(logger: Logger, caplog) -> None:
    nics = [Nic(**nic_dict())]
    assert generate_net_config(admin_nic=None, nics=nics, logger=logger) is None
    assert "No admin nic" in caplog.text


def test_minimal_config(logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tags_provided=["admin"], resolvers=["10.0.0.1"]))

    conf = generate_net_config(
        admin_nic=admin, nictags=[NicTag(name="admin")], logger=logger
    )

    assert conf.to_dict() == {
        "nictags": [{"name": "admin", "mac": admin.mac}],
        "admin_tag": "admin",
        "resolvers": ["10.0.0.1"],
        "routes": {},
        "vnics": [admin.to_dict()],
    }


def test_metadata(logger: Logger) -> None:
    dns_domain = random_lower_string()
    hostname = random_lower_string()
    datacenter_name = random_lower_string()

    conf = generate_net_config(
        admin_nic=Nic(**nic_dict()),
        dns_domain=dns_domain,
        hostname=hostname,
        datacenter_name=datacenter_name,
        logger=logger,
    )

    d = conf.to_dict()
    assert d["dns_domain"] == dns_domain
    assert d["hostname"] == hostname
    assert d["datacenter_name"] == datacenter_name
    assert "aggregations" not in d
    assert "nictag_rules" not in d


def test_resolvers_order(logger: Logger) -> None:
    """Admin resolvers go first, duplicates are dropped."""
    admin = Nic(**nic_dict(resolvers=["A", "B"]))
    other = Nic(**nic_dict(nic_tag="external", resolvers=["B", "C"]))

    conf = generate_net_config(admin_nic=admin, nics=[other], logger=logger)

    assert conf.resolvers == ["A", "B", "C"]


def test_admin_nic_goes_first(logger: Logger) -> None:
    admin = Nic(**nic_dict(resolvers=["A"]))
    other = Nic(**nic_dict(nic_tag="external", resolvers=["B"]))

    conf = generate_net_config(admin_nic=admin, nics=[other, admin], logger=logger)

    assert [i.mac for i in conf.vnics] == [admin.mac, other.mac]
    assert conf.resolvers == ["A", "B"]


def test_duplicate_macs_are_skipped(logger: Logger) -> None:
    """The first nic with a given mac wins."""
    admin = Nic(**nic_dict(resolvers=["A"], routes={"10.1.0.0/24": "10.0.0.1"}))
    duplicate = Nic(
        **nic_dict(
            mac=admin.mac,
            nic_tag="external",
            resolvers=["B"],
            routes={"10.2.0.0/24": "10.0.0.1"},
            nic_tags_provided=["external"],
        )
    )

    conf = generate_net_config(
        admin_nic=admin,
        nics=[duplicate],
        nictags=[NicTag(name="external")],
        logger=logger,
    )

    assert conf.vnics == [admin]
    assert conf.resolvers == ["A"]
    assert conf.routes == {"10.1.0.0/24": "10.0.0.1"}
    assert conf.nictags[0].mac is None


def test_nics_without_mac_are_skipped(logger: Logger) -> None:
    admin = Nic(**nic_dict())
    conf = generate_net_config(
        admin_nic=admin, nics=[Nic(ip=random_ip(), netmask="255.0.0.0")], logger=logger
    )
    assert conf.vnics == [admin]


def test_routes_merge(logger: Logger) -> None:
    """Routes are merged. On a repeated destination the last processed nic wins."""
    admin = Nic(**nic_dict(routes={"10.1.0.0/24": "10.0.0.1", "0.0.0.0/0": "a"}))
    other = Nic(**nic_dict(routes={"10.2.0.0/24": "10.0.0.2", "0.0.0.0/0": "b"}))

    conf = generate_net_config(admin_nic=admin, nics=[other], logger=logger)

    assert conf.routes == {
        "10.1.0.0/24": "10.0.0.1",
        "10.2.0.0/24": "10.0.0.2",
        "0.0.0.0/0": "b",
    }


def test_nics_without_address_are_not_vnics(logger: Logger) -> None:
    """Nics without an IP are not vnics but still carry their nic tags."""
    admin = Nic(**nic_dict())
    physical = Nic(mac=random_mac(), nic_tags_provided=["external"])
    no_netmask = Nic(mac=random_mac(), ip=random_ip())

    conf = generate_net_config(
        admin_nic=admin,
        nics=[physical, no_netmask],
        nictags=[NicTag(name="external")],
        logger=logger,
    )

    assert conf.vnics == [admin]
    assert conf.nictags[0].mac == physical.mac


def test_later_nic_overrides_tag(logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tags_provided=["admin", "external"]))
    other = Nic(mac=random_mac(), nic_tags_provided=["external"])

    conf = generate_net_config(
        admin_nic=admin,
        nics=[other],
        nictags=[NicTag(name="admin"), NicTag(name="external")],
        logger=logger,
    )

    assert [(i.name, i.mac) for i in conf.nictags] == [
        ("admin", admin.mac),
        ("external", other.mac),
    ]


def test_aggregation_wins_over_nic(logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tags_provided=["admin"]))
    physical = Nic(**nic_dict(nic_tag="storage", nic_tags_provided=["storage"]))
    aggr = Aggregation(
        name="aggr0", macs=[physical.mac, random_mac()], nic_tags_provided=["storage"]
    )

    conf = generate_net_config(
        admin_nic=admin,
        nics=[physical],
        aggrs=[aggr],
        nictags=[NicTag(name="admin"), NicTag(name="storage")],
        logger=logger,
    )

    assert conf.nictags[1].mac == "aggr0"
    assert conf.aggregations == [aggr]


def test_empty_aggregations_are_attached(logger: Logger) -> None:
    conf = generate_net_config(admin_nic=Nic(**nic_dict()), aggrs=[], logger=logger)
    assert conf.to_dict()["aggregations"] == []


def test_admin_tag_first_boot_fallback(logger: Logger) -> None:
    """A server with the admin nic as only vnic gets the admin tag set to it."""
    admin = Nic(**nic_dict(nic_tag="sdc_admin"))

    conf = generate_net_config(
        admin_nic=admin,
        nictags=[NicTag(name="external"), NicTag(name="sdc_admin")],
        logger=logger,
    )

    assert conf.nictags[0].mac is None
    assert conf.nictags[1].mac == admin.mac


def test_admin_tag_no_fallback_with_more_vnics(logger: Logger) -> None:
    admin = Nic(**nic_dict())
    other = Nic(**nic_dict(nic_tag="external"))

    conf = generate_net_config(
        admin_nic=admin, nics=[other], nictags=[NicTag(name="admin")], logger=logger
    )

    assert conf.nictags[0].mac is None
    assert conf.to_dict()["nictags"] == [{"name": "admin"}]


def test_admin_tag_fallback_only_first_match(logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tag="sdc_admin"))

    conf = generate_net_config(
        admin_nic=admin,
        nictags=[NicTag(name="admin"), NicTag(name="sdc_admin")],
        logger=logger,
    )

    assert conf.nictags[0].mac == admin.mac
    assert conf.nictags[1].mac is None


def test_admin_tag_fallback_keeps_existing_mac(logger: Logger) -> None:
    admin = Nic(**nic_dict())
    pinned = random_mac()

    conf = generate_net_config(
        admin_nic=admin, nictags=[NicTag(name="admin", mac=pinned)], logger=logger
    )

    assert conf.nictags[0].mac == pinned


def test_underlay_nic(logger: Logger) -> None:
    admin = Nic(**nic_dict())
    underlay = Nic(**nic_dict(nic_tag="sdc_underlay", underlay=True))

    conf = generate_net_config(
        admin_nic=admin, nics=[underlay], overlay=overlay_config(), logger=logger
    )

    ip = underlay.ip
    assert conf.nictag_rules == {
        "sdc_overlay": "-e vxlan -s svp -p svp/host=portolan.example.com "
        f"-p svp/underlay_ip={ip} -p vxlan/listen_ip={ip} -p mtu=1400"
    }
    assert conf.vnics[1].overlay_nic_tags_provided == ["sdc_overlay"]
    assert conf.vnics[0].overlay_nic_tags_provided is None
    assert underlay.overlay_nic_tags_provided is None


@parametrize_with_cases("overlay, nic", cases=CaseNotUnderlay)
def test_not_underlay_nic(overlay: OverlayConfig | None, nic: Nic) -> None:
    assert not is_underlay_nic(overlay, nic)


def test_inputs_not_modified_and_idempotent(logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tags_provided=["admin"], resolvers=["A"]))
    underlay = Nic(
        **nic_dict(nic_tag="sdc_underlay", underlay=True, nic_tags_provided=["ul"])
    )
    nics = [underlay]
    nictags = [NicTag(name="admin"), NicTag(name="ul", uuid="x", mtu=9000)]
    aggrs = [Aggregation(name="aggr0", nic_tags_provided=["ul"])]
    kwargs = {
        "admin_nic": admin,
        "nics": nics,
        "aggrs": aggrs,
        "nictags": nictags,
        "overlay": overlay_config(),
        "dns_domain": "example.com",
        "logger": logger,
    }

    first = generate_net_config(**kwargs)
    second = generate_net_config(**kwargs)

    assert first.to_json() == second.to_json()
    assert nics == [underlay]
    assert [i.mac for i in nictags] == [None, None]
    assert "mac" not in nictags[1].to_dict()
    assert json.loads(first.to_json())["nictags"][1] == {
        "name": "ul",
        "uuid": "x",
        "mtu": 9000,
        "mac": "aggr0",
    }


def test_write_json_file(tmp_path: Path, logger: Logger) -> None:
    directory = tmp_path / "bootfs" / "aabbccddeeff"
    payload = {"b": [1, 2], "a": "x"}

    data = write_json_file(directory, "test.json", payload, logger=logger)

    fname = directory / "test.json"
    assert fname.read_bytes() == data
    assert json.loads(data) == payload
    assert data.endswith(b"\n")
    assert oct(os.stat(fname).st_mode & 0o777) == oct(0o644)
    assert os.listdir(directory) == ["test.json"]


def test_write_net_config(tmp_path: Path, logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tags_provided=["admin"]))

    conf = write_net_config(
        bootfs_dir=tmp_path,
        admin_nic=admin,
        nictags=[NicTag(name="admin")],
        logger=logger,
    )

    data = (tmp_path / "networking.json").read_bytes()
    digest = (tmp_path / "networking.json.hash").read_text()
    assert data == conf.to_json().encode("utf-8")
    assert digest == hashlib.sha1(data).hexdigest()
    assert json.loads(data)["nictags"] == [{"name": "admin", "mac": admin.mac}]


def test_write_net_config_admin_pool_tag(tmp_path: Path, logger: Logger) -> None:
    admin = Nic(**nic_dict(nic_tag="sdc_admin"))

    conf = write_net_config(
        bootfs_dir=tmp_path,
        admin_pool_nic_tags=["sdc_admin"],
        admin_nic=admin,
        nictags=[NicTag(name="sdc_admin")],
        logger=logger,
    )

    assert conf is not None
    assert (tmp_path / "networking.json").exists()


def test_write_net_config_no_admin_tag(tmp_path: Path, logger: Logger, caplog) -> None:
    conf = write_net_config(
        bootfs_dir=tmp_path,
        admin_nic=Nic(**nic_dict(nic_tag="sdc_admin")),
        nictags=[NicTag(name="sdc_admin")],
        logger=logger,
    )

    assert conf is None
    assert os.listdir(tmp_path) == []
    assert "No admin nic tag found" in caplog.text


def test_write_net_config_no_admin_nic(tmp_path: Path, logger: Logger) -> None:
    assert write_net_config(bootfs_dir=tmp_path, admin_nic=None, logger=logger) is None
    assert os.listdir(tmp_path) == []
