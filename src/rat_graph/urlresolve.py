"""Resolve relative file URLs found in node content."""

from urllib.parse import urlsplit, urlunsplit

import requests
from loguru import logger

from rat_graph.config import FILE_ENDPOINT, Fileserver
from rat_graph.exceptions import NodeNotFoundError


def is_absolute_url(url: str) -> bool:
    return urlsplit(url).scheme != ""


class UrlResolver:
    """Map relative file URLs onto the file proxy endpoint and fileservers.

    Relative URLs in node content (images, embeds) are served by this
    service's file proxy. The proxy in turn asks each configured fileserver
    whether it has the file and redirects to the first one that does.
    """

    def __init__(
        self,
        fileservers: tuple[Fileserver, ...] | list[Fileserver] = (),
        *,
        endpoint: str = FILE_ENDPOINT,
        session: requests.Session | None = None,
        timeout: float = 5.0,
    ) -> None:
        self.fileservers = tuple(fileservers)
        self.endpoint = endpoint if endpoint.endswith("/") else endpoint + "/"
        self.sess = session or requests.Session()
        self.timeout = timeout

        logger.debug(
            "URL resolver ready: endpoint {!r}, {} fileserver(s)",
            self.endpoint,
            len(self.fileservers),
        )

    def prefix_resolver_endpoint(self, url: str) -> str:
        """Return url unchanged if absolute, else rooted at the file endpoint."""
        if is_absolute_url(url):
            return url
        return self.endpoint + url.lstrip("/")

    def resolve(self, path: str) -> str:
        """Return the absolute URL of path on the first fileserver that has it.

        Raises:
            NodeNotFoundError: No fileserver is configured or none serves path.
        """
        if is_absolute_url(path):
            return path

        if not self.fileservers:
            msg = "no fileservers configured"
            raise NodeNotFoundError(msg)

        for fileserver in self.fileservers:
            url = self._fileserver_url(fileserver, path)
            auth = (fileserver.user, fileserver.password) if fileserver.user else None
            try:
                r = self.sess.head(url, auth=auth, timeout=self.timeout, allow_redirects=True)
            except requests.RequestException as e:
                logger.debug("HEAD {} failed: {}", url, e)
                continue

            if r.status_code != requests.codes.ok:
                logger.debug("HEAD {} returned status code {}", url, r.status_code)
                continue

            logger.debug("HEAD {} returned Content-Type {}", url, r.headers.get("Content-Type"))
            return url

        msg = f"failed to resolve file url {path!r}"
        raise NodeNotFoundError(msg)

    @staticmethod
    def _fileserver_url(fileserver: Fileserver, path: str) -> str:
        parts = urlsplit(fileserver.authority)
        base = parts.path.rstrip("/")
        return urlunsplit((parts.scheme, parts.netloc, f"{base}/{path.lstrip('/')}", "", ""))
