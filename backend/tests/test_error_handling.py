import logging
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from rivalry.exceptions import DomainException
from rivalry.main import (
    domain_exception_handler,
    store_failure_handler,
    unhandled_exception_handler,
)
from rivalry.exceptions import PlayerNotFound


def _app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(OperationalError, store_failure_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/boom")
    def boom():
        raise ValueError("boom")

    @app.get("/store")
    def store():
        raise OperationalError("UPDATE player", {}, Exception("database is locked"))

    @app.get("/missing")
    def missing():
        raise PlayerNotFound("Ghost")

    return app


def test_unhandled_exception_logs_traceback(caplog):
    client = TestClient(_app(), raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "internal_server_error"
    record = next((r for r in caplog.records if r.message == "Unhandled exception"), None)
    assert record is not None
    assert record.exc_info[0] is ValueError
    assert "ValueError: boom" in caplog.text


def test_store_failure_is_logged_and_not_leaked(caplog):
    client = TestClient(_app(), raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR):
        response = client.get("/store")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "store_failure"
    assert "locked" not in body["detail"]
    record = next((r for r in caplog.records if r.message == "Store failure"), None)
    assert record is not None
    assert record.exc_info[0] is OperationalError


def test_domain_exception_is_problem_json():
    client = TestClient(_app())
    response = client.get("/missing")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json() == {
        "type": "about:blank",
        "title": "Player not found",
        "detail": "player 'Ghost' not found",
        "status": 404,
        "instance": None,
        "code": "player_not_found",
    }
