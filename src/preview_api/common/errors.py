class LinkPreviewError(Exception):
    """Base for errors that end a preview request with a public error message."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class MissingURLError(LinkPreviewError):
    status_code = 400
    message = "URL is required"


class InvalidURLError(LinkPreviewError):
    status_code = 400
    message = "Invalid URL format"


class BlockedDomainError(LinkPreviewError):
    status_code = 403
    message = "Domain not allowed"


class RateLimitedError(LinkPreviewError):
    status_code = 429
    message = "Rate limit exceeded"


class GenericFetchError(LinkPreviewError):
    status_code = 500
    message = "Failed to fetch URL"


class UpstreamStrategyError(Exception):
    """A single resolver strategy failed. Never leaves the resolver."""

    def __init__(self, strategy: str, reason: str):
        super().__init__(f"{strategy}: {reason}")
        self.strategy = strategy
        self.reason = reason


class UpstreamStatusError(LinkPreviewError):
    """An upstream answered a pass-through request with a non-2xx status."""

    def __init__(self, status_code: int):
        super().__init__(f"Upstream error {status_code}")
        self.status_code = status_code
