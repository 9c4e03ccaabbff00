"""Host and port descriptions and a TCP reachability check."""

from __future__ import annotations

import socket
from dataclasses import dataclass

TCP_TIMEOUT = 5.0


@dataclass(frozen=True)
class HostPort:
    """An address and a port."""

    address: str
    port: int

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


@dataclass
class Endpoint:
    """A named endpoint reachable internally and externally."""

    name: str
    internal: HostPort | None = None
    external: HostPort | None = None


@dataclass
class MockOptions:
    """Makes tcp_check answer without touching the network."""

    desired_endpoint: str = ""


def tcp_check(host_port: HostPort, mock: MockOptions | None = None) -> bool:
    """Tell whether a TCP connection to host_port can be opened.

    With mock options, answer whether host_port is the desired endpoint.
    """
    if mock is not None:
        return mock.desired_endpoint == str(host_port)
    try:
        with socket.create_connection((host_port.address, host_port.port), timeout=TCP_TIMEOUT):
            return True
    except OSError:
        return False