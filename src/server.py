"""HTTP trigger for release-watch.

Any request on any path runs exactly one check invocation. The response only
carries the outcome: 200 when the invocation reached DONE, 500 when it was
aborted. A fresh pipeline is built per request so overlapping requests share
nothing but the dedup store.
"""

from __future__ import annotations

import logging
import time
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Tuple, Type

from core.errors import PipelineError
from core.pipeline import ReleaseNotesPipeline

LOGGER = logging.getLogger(__name__)

PipelineFactory = Callable[[], ReleaseNotesPipeline]


def run_invocation(pipeline_factory: PipelineFactory) -> HTTPStatus:
    """Run one check and map its outcome to an HTTP status."""

    try:
        pipeline_factory().run()
    except PipelineError:
        # Already logged with its state by the pipeline.
        return HTTPStatus.INTERNAL_SERVER_ERROR
    except Exception:
        LOGGER.exception("Unexpected error while running check")
        return HTTPStatus.INTERNAL_SERVER_ERROR
    return HTTPStatus.OK


def build_handler(pipeline_factory: PipelineFactory) -> Type[BaseHTTPRequestHandler]:
    """Return a request handler class bound to the given pipeline factory."""

    class CheckHandler(BaseHTTPRequestHandler):
        server_version = "release-watch"

        def _respond(self, with_body: bool = True) -> None:
            started = time.monotonic()
            status = run_invocation(pipeline_factory)
            body = f"{status.phrase}\n".encode("utf-8")

            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if with_body:
                self.wfile.write(body)

            LOGGER.info(
                "%s %s -> %s (%.0f ms)",
                self.command,
                self.path,
                status.value,
                (time.monotonic() - started) * 1000,
            )

        # The trigger is method-agnostic.
        def do_GET(self) -> None:
            self._respond()

        do_POST = do_GET
        do_PUT = do_GET
        do_PATCH = do_GET
        do_DELETE = do_GET
        do_OPTIONS = do_GET

        def do_HEAD(self) -> None:
            self._respond(with_body=False)

        def log_message(self, format: str, *args) -> None:
            # Requests are logged by _respond; keep stderr quiet.
            LOGGER.debug("%s - %s", self.address_string(), format % args)

    return CheckHandler


def make_server(address: Tuple[str, int], pipeline_factory: PipelineFactory) -> ThreadingHTTPServer:
    return ThreadingHTTPServer(address, build_handler(pipeline_factory))


def serve(port: int, pipeline_factory: PipelineFactory, host: str = "") -> None:
    """Listen on port until interrupted."""

    httpd = make_server((host, port), pipeline_factory)
    LOGGER.info("Listening on port %s", port)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        LOGGER.info("Shutting down")
    finally:
        httpd.server_close()
