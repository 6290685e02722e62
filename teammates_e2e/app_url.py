"""
URLs into the application under test.
"""

from typing import Optional, Tuple
from urllib.parse import urlencode, urlsplit

from .config import Config, get_config
from .const import ParamsNames


class AppUrl:
    """Immutable absolute URL with a fluent query-parameter builder.

    ``with_*`` methods return a new ``AppUrl``; the receiver is left unchanged.
    """

    def __init__(self, url: str, params: Tuple[Tuple[str, str], ...] = ()):
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Not an absolute URL: {url}")
        self._base = url
        self._params = params

    def with_param(self, name: str, value: str) -> "AppUrl":
        return AppUrl(self._base, self._params + ((name, value),))

    def with_user_id(self, user_id: str) -> "AppUrl":
        return self.with_param(ParamsNames.USER_ID, user_id)

    def with_course_id(self, course_id: str) -> "AppUrl":
        return self.with_param(ParamsNames.COURSE_ID, course_id)

    def with_session_name(self, session_name: str) -> "AppUrl":
        return self.with_param(ParamsNames.FEEDBACK_SESSION_NAME, session_name)

    def with_registration_key(self, key: str) -> "AppUrl":
        return self.with_param(ParamsNames.REGKEY, key)

    def to_absolute_string(self) -> str:
        if not self._params:
            return self._base
        separator = "&" if "?" in self._base else "?"
        return f"{self._base}{separator}{urlencode(self._params)}"

    def to_relative_string(self) -> str:
        """Path, query and fragment, without scheme and host."""
        parts = urlsplit(self.to_absolute_string())
        relative = parts.path or "/"
        if parts.query:
            relative += "?" + parts.query
        if parts.fragment:
            relative += "#" + parts.fragment
        return relative

    def __str__(self) -> str:
        return self.to_absolute_string()

    def __repr__(self) -> str:
        return f"AppUrl({self.to_absolute_string()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, AppUrl):
            return NotImplemented
        return self.to_absolute_string() == other.to_absolute_string()

    def __hash__(self) -> int:
        return hash(self.to_absolute_string())


def create_url(relative_url: str, config: Optional[Config] = None) -> AppUrl:
    """Build an ``AppUrl`` under the configured app URL. ``relative_url`` must start with "/"."""
    if not relative_url.startswith("/"):
        raise ValueError(f"Relative URL must start with '/': {relative_url!r}")
    config = config or get_config()
    return AppUrl(config.app_url + relative_url)
