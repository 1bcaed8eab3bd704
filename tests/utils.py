import string
from ipaddress import IPv4Address
from random import choices, randint
from typing import Any
from uuid import uuid4

from pydantic import AnyHttpUrl

ADMIN_UUID = "00000000-0000-0000-0000-000000000000"


def random_lower_string() -> str:
    """Return a generic random string."""
    return "".join(choices(string.ascii_lowercase, k=32))


def random_url() -> AnyHttpUrl:
    """Return a random URL."""
    return "https://" + random_lower_string() + ".com"


def random_ip() -> str:
    """Return a random IPv4 address as string."""
    return str(IPv4Address(randint(0, 2**32 - 1)))


def random_mac() -> str:
    """Return a random MAC address with lowercase hex digits."""
    return ":".join(f"{randint(0, 255):02x}" for _ in range(6))


def random_uuid() -> str:
    """Return a random UUID as string."""
    return str(uuid4())


def nic_dict(**kwargs) -> dict[str, Any]:
    """Dict with the attributes of a nic with an IP, as returned by NAPI."""
    return {
        "mac": random_mac(),
        "ip": random_ip(),
        "netmask": "255.255.255.0",
        "nic_tag": "admin",
        "belongs_to_uuid": random_uuid(),
        "belongs_to_type": "server",
        "owner_uuid": random_uuid(),
        "primary": False,
        "state": "running",
        **kwargs,
    }
