"""Tests for operating system detection."""

import pytest

from config.constants import OperatingSystem
from exceptions.probes import OperatingSystemNotFoundError
from utils.system import current_operating_system


class TestCurrentOperatingSystem:
    """Tests for current_operating_system()."""

    @pytest.mark.parametrize("name", ["Windows", "CYGWIN_NT-10.0", "MSYS_NT-10.0"])
    def test_windows_family(self, name: str) -> None:
        assert current_operating_system(name) == OperatingSystem.WINDOWS

    @pytest.mark.parametrize("name", ["Linux", "Darwin", "FreeBSD", "OpenBSD", "SunOS", "AIX"])
    def test_unix_family(self, name: str) -> None:
        assert current_operating_system(name) == OperatingSystem.UNIX

    @pytest.mark.parametrize("name", ["Plan9", "Java", ""])
    def test_unknown(self, name: str) -> None:
        """Test that other platforms are not guessed."""
        with pytest.raises(OperatingSystemNotFoundError) as exc_info:
            current_operating_system(name)

        assert "not found" in exc_info.value.message

    def test_running_platform(self) -> None:
        """Test that the test host itself is classified."""
        assert current_operating_system() in set(OperatingSystem)
