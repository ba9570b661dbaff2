# hanlon/config/ip_discovery.py
"""
Best-effort discovery of the local outbound IPv4 address.

A UDP socket is "connected" to a well-known external address. No packet is
sent; the call only makes the OS pick a source address, which is then read
back from the socket. Python does no reverse DNS lookup here, so there is no
resolver setting to toggle and restore.

The result is a heuristic: any interface may win (VPN, docker bridge...),
and reachability is not checked.
"""

import ipaddress
import logging
import socket
from typing import List, Tuple

from hanlon.error_handling import IPDiscoveryError

logger = logging.getLogger(__name__)

PROBE_TARGET: Tuple[str, int] = ("4.2.2.1", 1)
FALLBACK_ADDRESS = "127.0.0.1"


def _probe_source_address(target: Tuple[str, int] = PROBE_TARGET) -> str:
    """Return the source address the OS selects for ``target``."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(target)
            return sock.getsockname()[0]
    except OSError as e:
        raise IPDiscoveryError(f"Local address probe towards {target[0]} failed: {e}") from e


def _is_usable_ipv4(address: str) -> bool:
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return False
    return ip.version == 4 and not ip.is_unspecified


def local_addresses() -> List[str]:
    """
    Return the discovered local IPv4 addresses, in order, without duplicates.
    Never raises: any failure yields an empty list.
    """
    try:
        candidates = [_probe_source_address()]
    except IPDiscoveryError as e:
        logger.debug(f"[{e.category.value}] IP discovery failed: {e}")
        return []

    addresses: List[str] = []
    for candidate in candidates:
        if _is_usable_ipv4(candidate) and candidate not in addresses:
            addresses.append(candidate)
    return addresses


def pick_default_address() -> str:
    """First discovered address, or 127.0.0.1 when none was found."""
    addresses = local_addresses()
    if not addresses:
        logger.warning(f"⚠️ No local IPv4 address discovered, using {FALLBACK_ADDRESS}")
        return FALLBACK_ADDRESS
    return addresses[0]
