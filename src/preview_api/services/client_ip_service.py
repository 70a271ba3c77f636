import re

from fastapi import Request


def detect_client_ip(request: Request) -> str:
    """Best-effort extraction of the original client IP, used as the rate-limit key."""
    # X-Forwarded-For can contain multiple IPs, first one is the original client
    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        first = x_forwarded_for.split(",")[0].strip()
        if first:
            return first

    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    # Forwarded header (RFC 7239)
    forwarded = request.headers.get("Forwarded")
    if forwarded:
        match = re.search(r'for="?([^";,]+)"?', forwarded)
        if match:
            return match.group(1)

    if request.client and request.client.host:
        return request.client.host
    return "unknown"
