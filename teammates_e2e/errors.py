"""
Exceptions raised by the E2E harness.

Backdoor failures surface as ``HttpRequestFailedError``; page object
mismatches as ``IncorrectPageError``. Everything else propagates unchanged
to pytest.
"""


class HttpRequestFailedError(Exception):
    """A backdoor request returned a non-success status code.

    Attributes:
        status_code: HTTP status returned by the server.
        body: Raw response body, kept for failure reports.
    """

    def __init__(self, status_code: int, body: str = "", method: str = "", path: str = ""):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        target = f"{method} {path} " if method else ""
        super().__init__(f"{target}failed with HTTP {status_code}: {body[:200]}")


class IncorrectPageError(Exception):
    """The browser is not showing the page the page object expects."""

    def __init__(self, page_type: str, url: str = ""):
        self.page_type = page_type
        self.url = url
        super().__init__(f"Not in the correct page! Expected {page_type} at {url or '<unknown>'}")
