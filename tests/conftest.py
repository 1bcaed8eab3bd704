import os
from logging import Logger, getLogger
from unittest.mock import Mock

import pytest

from booter.clients.cnapi import CnapiClient
from booter.clients.napi import NapiClient
from booter.config import Settings
from booter.models.boot_params import BootParams


@pytest.fixture(autouse=True)
def clear_os_environment() -> None:
    """Clear the OS environment."""
    os.environ.clear()


@pytest.fixture
def logger() -> Logger:
    return getLogger("test")


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def napi() -> Mock:
    """NAPI client mock."""
    return Mock(spec=NapiClient)


@pytest.fixture
def cnapi() -> Mock:
    """CNAPI client mock returning empty default boot params."""
    client = Mock(spec=CnapiClient)
    client.get_boot_params.return_value = BootParams(kernel_args={})
    return client
