"""Shared fixtures."""

import pytest

from fakes import FakeTransport
from kachina.config import ClientConfig


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    return ClientConfig(
        owners=["6289999999999"],
        database_path=tmp_path / "db",
        reconnect={"base_delay_s": 0, "max_delay_s": 0},
        pairing_delay_s=0,
    )
