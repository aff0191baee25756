import dns.exception
import dns.resolver
import pytest

from nsbench.resolver import DnsPythonResolver, dnspython_factory


def test_resolver_is_uncached_and_pinned():
    resolver = DnsPythonResolver("127.0.0.1", port=5353)
    assert resolver._resolver.cache is None
    assert resolver._resolver.port == 5353
    assert resolver.nameserver == "127.0.0.1"


def test_successful_lookup(monkeypatch):
    resolver = DnsPythonResolver("127.0.0.1")
    seen = {}

    def fake_resolve(qname, rdtype, **kwargs):
        seen.update(qname=qname, rdtype=rdtype, **kwargs)
        return object()

    monkeypatch.setattr(resolver._resolver, "resolve", fake_resolve)
    assert resolver.lookup("example.com", "A", 0.25) is True
    assert seen["qname"] == "example.com"
    assert seen["lifetime"] == 0.25
    assert seen["tcp"] is False
    assert resolver._resolver.timeout == 0.25


@pytest.mark.parametrize(
    "error",
    [
        dns.exception.Timeout(),
        dns.resolver.NXDOMAIN(),
        dns.resolver.NoAnswer(),
        dns.resolver.NoNameservers(),
        OSError("Network is unreachable"),
    ],
)
def test_errors_are_failures(monkeypatch, error):
    resolver = DnsPythonResolver("127.0.0.1")

    def fake_resolve(*args, **kwargs):
        raise error

    monkeypatch.setattr(resolver._resolver, "resolve", fake_resolve)
    assert resolver.lookup("example.com", "A", 0.1) is False


def test_factory_builds_fresh_resolvers():
    factory = dnspython_factory("192.0.2.1", 53)
    first, second = factory(), factory()
    assert first is not second
    assert first.nameserver == "192.0.2.1"
