"""Release channels and the HTTP fetcher for application archives."""

import enum
from typing import Optional

import httpx

from larapress_installer.errors import FetchError

DEFAULT_RELEASE_URL = "http://cabinet.laravel.com"

ARCHIVE_NAMES = {
    "stable": "latest.zip",
    "prerelease": "latest-develop.zip",
}


class ReleaseChannel(enum.Enum):
    STABLE = "stable"
    PRERELEASE = "prerelease"

    @classmethod
    def from_dev_flag(cls, dev: bool) -> "ReleaseChannel":
        return cls.PRERELEASE if dev else cls.STABLE

    @property
    def archive_name(self) -> str:
        return ARCHIVE_NAMES[self.value]


def archive_url(channel: ReleaseChannel, release_url: str = DEFAULT_RELEASE_URL) -> str:
    """Return the download URL of the archive published for ``channel``."""
    return f"{release_url.rstrip('/')}/{channel.archive_name}"


class ReleaseFetcher:
    """Downloads release archives into memory."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = 60.0):
        self._client = client
        self._timeout = timeout

    def fetch(self, url: str) -> bytes:
        """Download ``url`` and return the body.

        Raises:
            FetchError: On any transport fault or a non-200 response.
        """
        client = self._client or httpx.Client()
        try:
            response = client.get(url, timeout=self._timeout, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError("Unable to download release archive", url, e) from e
        finally:
            if self._client is None:
                client.close()

        if response.status_code != 200:
            raise FetchError(
                f"Release server returned {response.status_code}", url,
            )
        return response.content
