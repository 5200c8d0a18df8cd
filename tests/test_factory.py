"""Tests for driver factory."""

from unittest.mock import AsyncMock

import pytest

from coinfeed.drivers.bitmart import BitmartDriver
from coinfeed.drivers.factory import DRIVERS, create_driver
from coinfeed.drivers.gate import GateDriver
from coinfeed.drivers.uniswap3 import Uniswap3Driver
from coinfeed.drivers.xmex import XmexDriver


class TestDriverFactory:
    """Tests for driver factory."""

    def test_registry(self):
        assert DRIVERS == {
            "bitmart": BitmartDriver,
            "gate": GateDriver,
            "uniswap3": Uniswap3Driver,
            "xmex": XmexDriver,
        }

    def test_registry_names_match_driver_names(self):
        for name, driver_class in DRIVERS.items():
            assert driver_class.name == name

    def test_create_with_shared_request(self):
        request = AsyncMock()
        driver = create_driver("bitmart", request)

        assert isinstance(driver, BitmartDriver)
        assert driver._request is request

    def test_name_case_insensitive(self):
        assert isinstance(create_driver("Uniswap3", AsyncMock()), Uniswap3Driver)

    def test_markets_and_options(self):
        driver = create_driver(
            "uniswap3",
            AsyncMock(),
            markets=["0xpool"],
            pools_url="https://pools.test",
            block_window=300,
        )

        assert driver.markets == ["0xpool"]
        assert driver.pools_url == "https://pools.test"
        assert driver.block_window == 300

    def test_unknown_options_ignored(self):
        driver = create_driver("gate", AsyncMock(), retry_budget=3)

        assert driver.options == {"retry_budget": 3}

    def test_unsupported_driver(self):
        with pytest.raises(ValueError, match="Unsupported driver: kraken"):
            create_driver("kraken")

    def test_unsupported_driver_lists_supported(self):
        with pytest.raises(ValueError, match="bitmart, gate, uniswap3, xmex"):
            create_driver("kraken")
