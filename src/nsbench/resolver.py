import logging
from typing import Protocol
from collections.abc import Callable

import dns.exception
import dns.resolver

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def lookup(self, hostname: str, record_type: str, timeout: float) -> bool: ...


# Called once inside each worker thread; may raise to signal an initialization failure
ResolverFactory = Callable[[], Resolver]


class DnsPythonResolver:
    """Single-nameserver UDP resolver with caching disabled.

    Every DNS or socket error (timeout, NXDOMAIN, empty answer, unreachable
    network, malformed response) is reported as ``False``.
    """

    def __init__(self, nameserver: str, port: int = 53) -> None:
        self.nameserver = nameserver
        self.port = port
        self._resolver = dns.resolver.Resolver(configure=False)
        self._resolver.port = port
        self._resolver.nameservers = [nameserver]
        self._resolver.cache = None
        self._resolver.retry_servfail = False
        logger.debug(f"Created resolver for {nameserver}:{port}")

    def lookup(self, hostname: str, record_type: str, timeout: float) -> bool:
        self._resolver.timeout = timeout
        try:
            self._resolver.resolve(
                hostname,
                record_type,
                tcp=False,
                lifetime=timeout,
                search=False,
            )
            return True
        except dns.exception.DNSException as e:
            logger.debug(f"Lookup {hostname}/{record_type} failed: {type(e).__name__}")
            return False
        except OSError as e:
            logger.debug(f"Lookup {hostname}/{record_type} socket error: {e}")
            return False


def dnspython_factory(nameserver: str, port: int = 53) -> ResolverFactory:
    def build() -> Resolver:
        return DnsPythonResolver(nameserver, port)

    return build
