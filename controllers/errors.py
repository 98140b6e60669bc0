class ProxyError(Exception):
    """Base class for failures that end a proxied request with a plain-text response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def render(self) -> str:
        if self.status_code >= 500:
            return f"Proxy error: {self.message}"
        return self.message


class MissingTarget(ProxyError):
    status_code = 400

    def __init__(self, message: str = "No URL provided"):
        super().__init__(message)


class MalformedEncoding(ProxyError):
    status_code = 400

    def __init__(self, message: str = "Invalid URL encoding"):
        super().__init__(message)


class UnsupportedScheme(ProxyError):
    status_code = 400

    def __init__(self, message: str = "Invalid URL - must start with http:// or https://"):
        super().__init__(message)


class UpstreamUnreachable(ProxyError):
    """Every attempt failed before the upstream produced a response."""


class UpstreamError(ProxyError):
    """The upstream answered, but not with a 2xx status."""

    def __init__(self, status: int, status_text: str):
        super().__init__(f"Upstream server responded with {status}: {status_text}")
        self.status = status
        self.status_text = status_text


class InternalError(ProxyError):
    pass


class ClientDisconnected(ProxyError):
    """The client went away before the upstream answered; nobody reads this response."""

    status_code = 499

    def __init__(self, message: str = "Client closed request"):
        super().__init__(message)
