from __future__ import annotations

import threading
from http import HTTPStatus

import httpx
import pytest

from core.errors import FetchError
from server import make_server, run_invocation


class FakePipeline:
    def __init__(self, error: "Exception | None" = None) -> None:
        self.error = error
        self.runs = 0

    def run(self) -> None:
        self.runs += 1
        if self.error:
            raise self.error


def test_done_maps_to_ok() -> None:
    pipeline = FakePipeline()
    assert run_invocation(lambda: pipeline) == HTTPStatus.OK
    assert pipeline.runs == 1


def test_aborted_maps_to_server_error() -> None:
    assert run_invocation(lambda: FakePipeline(FetchError("down"))) == HTTPStatus.INTERNAL_SERVER_ERROR


def test_unexpected_error_maps_to_server_error() -> None:
    assert run_invocation(lambda: FakePipeline(KeyError("boom"))) == HTTPStatus.INTERNAL_SERVER_ERROR


@pytest.fixture
def running_server():
    pipelines: list[FakePipeline] = []
    errors: list[Exception] = []

    def factory() -> FakePipeline:
        pipeline = FakePipeline(errors[0] if errors else None)
        pipelines.append(pipeline)
        return pipeline

    httpd = make_server(("127.0.0.1", 0), factory)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{httpd.server_address[1]}", pipelines, errors
    finally:
        httpd.shutdown()
        httpd.server_close()


def test_any_method_and_path_triggers_one_invocation(running_server) -> None:
    base_url, pipelines, _ = running_server

    assert httpx.get(f"{base_url}/").status_code == 200
    assert httpx.post(f"{base_url}/cron/release-notes").status_code == 200
    assert httpx.head(f"{base_url}/").status_code == 200
    assert len(pipelines) == 3


def test_aborted_invocation_returns_500(running_server) -> None:
    base_url, pipelines, errors = running_server
    errors.append(FetchError("down"))

    response = httpx.get(f"{base_url}/")

    assert response.status_code == 500
    assert response.text.strip() == "Internal Server Error"
    assert len(pipelines) == 1
