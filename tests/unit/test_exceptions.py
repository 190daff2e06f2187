"""
Test exception hierarchy and error handling helpers
"""
import logging
from unittest.mock import Mock

import pytest

from wgnet.core.exceptions import (
    DeviceControlError, ExceptionHandler, FirewallError, InterfacePermissionError,
    LockdownError, NatError, PolicySectionError, RoutingError, WgnetConfigurationError,
    WgnetException
)


class TestExceptionHierarchy:

    def test_base_exception(self):
        error = WgnetException("boom", operation="load", path="/etc/wgnet/wg0.yml")

        assert str(error) == "boom"
        assert error.operation == "load"
        assert error.context == {'path': "/etc/wgnet/wg0.yml"}

    def test_construction_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="wgnet.core.exceptions"):
            WgnetConfigurationError("bad document", operation="load")

        assert "* ERROR: wgnet: load: bad document" in caplog.text

    def test_permission_error_message(self):
        error = InterfacePermissionError("wg0", "Operation not permitted")

        assert "are you root?" in error.message
        assert "Operation not permitted" in error.message
        assert error.interface_name == "wg0"
        assert error.operation == "query"

    @pytest.mark.parametrize("error_class,stage", [
        (RoutingError, "routing"),
        (FirewallError, "firewall"),
        (NatError, "nat"),
        (LockdownError, "lockdown"),
    ])
    def test_section_errors(self, error_class, stage):
        error = error_class("rule failed", interface_name="wg0")

        assert isinstance(error, PolicySectionError)
        assert isinstance(error, WgnetException)
        assert error.stage == stage
        assert error.operation == stage
        assert error.interface_name == "wg0"

    def test_device_control_error(self):
        assert issubclass(DeviceControlError, WgnetException)


class TestExceptionHandler:

    def test_handle_error(self):
        logger = Mock()

        ExceptionHandler(logger).handle_error(ValueError("broken"), "remove firewall")

        logger.error.assert_called_once_with("* ERROR: wgnet: remove firewall: broken")

