from __future__ import annotations

import errno
import logging
import threading
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import quote, urlsplit

from .errors import ResourceBusyError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000

# Documents reference assets through these fixed paths.
ASSET_MOUNTS = ("static", "static/reader")


class _MountedRequestHandler(SimpleHTTPRequestHandler):
    """Serves files from the mount whose URL prefix matches the request."""

    def __init__(self, *args, mounts: tuple[tuple[str, Path], ...], **kwargs):
        self.mounts = mounts
        super().__init__(*args, **kwargs)

    def translate_path(self, path: str) -> str:
        url_path = urlsplit(path).path
        for prefix, directory in self.mounts:
            if prefix == "/":
                remainder = path
            elif url_path == prefix or url_path.startswith(prefix + "/"):
                remainder = path[len(prefix):] or "/"
            else:
                continue
            self.directory = str(directory)
            return super().translate_path(remainder)
        return super().translate_path(path)

    def log_message(self, format: str, *args) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


class _StaticHTTPServer(ThreadingHTTPServer):
    # Sharing the port with another listener would hide a busy port.
    allow_reuse_port = False
    daemon_threads = True


class StaticContentServer:
    """Serve a document directory on a local port for the length of one run.

    ``/`` maps to the directory itself; ``/static`` and ``/static/reader``
    map to the matching subfolders.
    """

    def __init__(self, root: str | Path, *, host: str = "127.0.0.1", port: int = DEFAULT_PORT) -> None:
        self.root = Path(root).resolve()
        self.host = host
        self._requested_port = port
        self._httpd: _StaticHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._closed = False

    def mounts(self) -> tuple[tuple[str, Path], ...]:
        entries = [("/", self.root)]
        entries += [("/" + sub, self.root.joinpath(*sub.split("/"))) for sub in ASSET_MOUNTS]
        # Longest prefix wins.
        return tuple(sorted(entries, key=lambda m: len(m[0]), reverse=True))

    @property
    def port(self) -> int:
        if self._httpd is None:
            return self._requested_port
        return self._httpd.server_address[1]

    @property
    def running(self) -> bool:
        return self._httpd is not None and not self._closed

    def start(self) -> StaticContentServer:
        if self._httpd is not None:
            raise RuntimeError("server already started")

        handler = partial(_MountedRequestHandler, mounts=self.mounts(), directory=str(self.root))
        try:
            self._httpd = _StaticHTTPServer((self.host, self._requested_port), handler)
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                raise ResourceBusyError(
                    f"Port {self._requested_port} is already in use",
                    stage="server",
                    original_error=e,
                ) from e
            raise ResourceBusyError(
                f"Cannot bind {self.host}:{self._requested_port}", stage="server", original_error=e
            ) from e

        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name=f"static-server-{self.port}",
            daemon=True,
        )
        self._thread.start()
        logger.info("Serving %s at http://%s:%d/", self.root, self.host, self.port)
        return self

    def stop(self) -> None:
        """Shut the server down. Safe to call more than once."""

        if self._httpd is None or self._closed:
            return
        self._closed = True
        try:
            self._httpd.shutdown()
            self._httpd.server_close()
        except OSError as e:
            logger.warning("Error while stopping static server: %s", e)
        if self._thread is not None:
            self._thread.join(timeout=5)
        logger.debug("Static server on port %d stopped", self.port)

    def url_for(self, relative_path: str) -> str:
        return f"http://{self.host}:{self.port}/{quote(relative_path)}"

    def __enter__(self) -> StaticContentServer:
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
