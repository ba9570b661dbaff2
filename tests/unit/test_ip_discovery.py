# tests/unit/test_ip_discovery.py
"""
Unit tests for local address discovery. The socket is always mocked.
"""

from unittest.mock import MagicMock, patch

from hanlon.config import ip_discovery
from hanlon.config.ip_discovery import local_addresses, pick_default_address


def _fake_socket(sockname=("192.168.1.20", 40000), connect_error=None):
    sock = MagicMock()
    sock.__enter__.return_value = sock
    sock.getsockname.return_value = sockname
    if connect_error is not None:
        sock.connect.side_effect = connect_error
    return sock


class TestLocalAddresses:

    def test_reports_selected_source_address(self):
        sock = _fake_socket()
        with patch("hanlon.config.ip_discovery.socket.socket", return_value=sock):
            assert local_addresses() == ["192.168.1.20"]
        sock.connect.assert_called_once_with(ip_discovery.PROBE_TARGET)

    def test_socket_error_yields_empty_list(self):
        sock = _fake_socket(connect_error=OSError(101, "Network is unreachable"))
        with patch("hanlon.config.ip_discovery.socket.socket", return_value=sock):
            assert local_addresses() == []

    def test_unspecified_address_is_discarded(self):
        sock = _fake_socket(sockname=("0.0.0.0", 0))
        with patch("hanlon.config.ip_discovery.socket.socket", return_value=sock):
            assert local_addresses() == []


class TestPickDefaultAddress:

    def test_first_address_wins(self):
        with patch("hanlon.config.ip_discovery.local_addresses", return_value=["10.1.1.1", "10.2.2.2"]):
            assert pick_default_address() == "10.1.1.1"

    def test_falls_back_to_localhost(self):
        with patch("hanlon.config.ip_discovery.local_addresses", return_value=[]):
            assert pick_default_address() == "127.0.0.1"
