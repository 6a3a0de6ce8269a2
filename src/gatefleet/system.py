"""Live port availability probe."""

import socket
from collections.abc import Iterable

from .console import debug


class PortProbe:
    """Check host ports by binding a transient listener on 127.0.0.1."""

    host = "127.0.0.1"

    def is_port_available(self, port: int) -> bool:
        """Test if a port can be bound to.

        Args:
            port: Port number to test

        Returns:
            True if port is available, False otherwise
        """
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                s.bind((self.host, port))
                return True
        except OSError as e:
            debug(f"Port {port} unavailable: {e}")
            return False

    def are_available(self, ports: Iterable[int]) -> bool:
        """Return True only if every port in *ports* can be bound."""
        return all(self.is_port_available(port) for port in ports)
