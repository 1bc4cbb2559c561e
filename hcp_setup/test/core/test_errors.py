"""Tests for hcp_setup.core.errors module."""

from hcp_setup.core.errors import ErrorCode


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_values_are_stable(self) -> None:
        assert ErrorCode.OK == 0
        assert ErrorCode.USER_ERROR == 1
        assert ErrorCode.ENV_ERROR == 2
        assert ErrorCode.DISCOVERY_ERROR == 3
        assert ErrorCode.NETWORK_ERROR == 4
        assert ErrorCode.INSTALL_ERROR == 5

    def test_str(self) -> None:
        assert str(ErrorCode.DISCOVERY_ERROR) == "discovery error"

    def test_success_flags(self) -> None:
        assert ErrorCode.OK.is_success
        assert not ErrorCode.OK.is_error
        assert ErrorCode.INSTALL_ERROR.is_error

    def test_usable_as_exit_code(self) -> None:
        """ErrorCode converts to int for sys.exit / typer.Exit."""
        assert int(ErrorCode.NETWORK_ERROR) == 4
