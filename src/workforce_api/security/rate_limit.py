"""Rate limits for login, token refresh and other sensitive endpoints."""

from functools import lru_cache
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from workforce_api.config import get_settings

# Loopback and private ranges, trusted only in development
DEVELOPMENT_PROXIES = ("127.0.0.1", "::1", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")


@lru_cache
def trusted_proxy_networks() -> tuple[IPv4Network | IPv6Network, ...]:
    """Networks whose X-Forwarded-For header is believed.

    Entries that do not parse are skipped. Outside development an empty
    TRUSTED_PROXIES setting means no proxy is trusted.
    """
    settings = get_settings()
    entries = settings.trusted_proxies_list
    if not entries and settings.environment == "development":
        entries = list(DEVELOPMENT_PROXIES)

    networks = []
    for entry in entries:
        try:
            networks.append(ip_network(entry, strict=False))
        except ValueError:
            continue
    return tuple(networks)


def _from_trusted_proxy(client_ip: str) -> bool:
    try:
        addr = ip_address(client_ip)
    except ValueError:
        return False
    return any(addr in network for network in trusted_proxy_networks())


def client_key(request: Request) -> str:
    """Rate limit key: the caller's address.

    The first X-Forwarded-For hop is used only when the direct peer is a
    trusted proxy and the hop is a valid address.
    """
    peer = get_remote_address(request)
    if not _from_trusted_proxy(peer):
        return peer

    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    try:
        return str(ip_address(forwarded))
    except ValueError:
        return peer


_settings = get_settings()

limiter = Limiter(
    key_func=client_key,
    default_limits=[f"{_settings.rate_limit_default}/minute"],
    enabled=_settings.rate_limit_enabled,
)

AUTH_LOGIN_LIMIT = f"{_settings.rate_limit_auth_login}/minute"
AUTH_REFRESH_LIMIT = f"{_settings.rate_limit_auth_refresh}/minute"
SENSITIVE_OPERATION_LIMIT = f"{_settings.rate_limit_sensitive}/minute"
