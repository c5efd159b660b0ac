import ipaddress
import logging
import re
import secrets
import string

from django.conf import settings
from rest_framework.request import Request

logger = logging.getLogger(__name__)

RANDOM_ALPHABET = string.ascii_letters + string.digits


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    ``X-Forwarded-For`` and ``X-Real-IP`` are only read when
    ``TRUST_PROXY_HEADERS`` is on.
    """
    if settings.TRUST_PROXY_HEADERS:
        # X-Forwarded-For can contain multiple IPs, take the first one
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            ip = x_forwarded_for.split(",")[0].strip()
            if is_valid_ip(ip):
                return ip

        x_real_ip = request.META.get("HTTP_X_REAL_IP")
        if x_real_ip and is_valid_ip(x_real_ip):
            return x_real_ip

    remote_addr = request.META.get("REMOTE_ADDR", "unknown")
    return remote_addr if is_valid_ip(remote_addr) else "unknown"


def is_valid_ip(ip: str) -> bool:
    """
    Validate if string is a valid IP address (IPv4 or IPv6)
    """
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False


def generate_random_string(length: int = 8) -> str:
    """
    Generate a random alphanumeric string
    """
    return "".join(secrets.choice(RANDOM_ALPHABET) for _ in range(length))


def slugify_title(title: str) -> str:
    """Replace every run of non-alphanumerics with a single dash."""
    return re.sub(r"[^A-Za-z0-9]+", "-", title.strip()).strip("-")


def parse_int(value, default: int, minimum: int = 0) -> int:
    """Coerce a request parameter to an int no smaller than ``minimum``."""
    try:
        return max(int(value), minimum)
    except (TypeError, ValueError):
        return default
