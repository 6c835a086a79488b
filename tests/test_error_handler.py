"""Tests for the catch-all error handler.

Verifies:
- status inference (status, status_code, default 500)
- message fallback to "Internal Server Error"
- the client gets a JSON body and the error still reaches the server
- framework errors (422 / 404 / 405) use the same {"message"} body
"""

import pytest
from fastapi import FastAPI
from pydantic import BaseModel
from fastapi.testclient import TestClient

from ecoquest.common.errors import ForbiddenError, NotFoundError
from ecoquest.common.exception_handlers import ErrorResponseMiddleware, error_payload, install_error_handler


class TeapotError(Exception):
    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class CodedError(Exception):
    status_code = 409


class Note(BaseModel):
    title: str


def build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/api/plain")
    def plain():
        raise RuntimeError()

    @app.get("/api/teapot")
    def teapot():
        raise TeapotError("short and stout", 418)

    @app.get("/api/missing")
    def missing():
        raise NotFoundError(code="TASK_NOT_FOUND", message="task not found")

    @app.get("/api/ok")
    def ok():
        return {"ok": True}

    @app.post("/api/notes")
    def create_note(note: Note):
        return {"title": note.title}

    install_error_handler(app)
    return app


class TestErrorPayload:
    def test_defaults(self):
        assert error_payload(RuntimeError()) == (500, {"message": "Internal Server Error"})

    def test_message_from_str(self):
        assert error_payload(ValueError("bad value")) == (500, {"message": "bad value"})

    def test_status_attribute(self):
        assert error_payload(TeapotError("m", 418)) == (418, {"message": "m"})

    def test_status_code_attribute(self):
        assert error_payload(CodedError("conflict")) == (409, {"message": "conflict"})

    def test_app_error(self):
        assert error_payload(ForbiddenError()) == (403, {"message": "forbidden"})

    def test_non_error_status_falls_back_to_500(self):
        assert error_payload(TeapotError("odd", 200))[0] == 500


class TestErrorResponses:
    def test_no_status_no_message(self):
        client = TestClient(build_app(), raise_server_exceptions=False)

        response = client.get("/api/plain")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}

    def test_status_and_message(self):
        client = TestClient(build_app(), raise_server_exceptions=False)

        response = client.get("/api/teapot")

        assert response.status_code == 418
        assert response.json() == {"message": "short and stout"}

    def test_app_error_response(self):
        client = TestClient(build_app(), raise_server_exceptions=False)

        response = client.get("/api/missing")

        assert response.status_code == 404
        assert response.json() == {"message": "task not found"}

    def test_error_is_re_raised_after_responding(self):
        client = TestClient(build_app(), raise_server_exceptions=True)

        with pytest.raises(TeapotError):
            client.get("/api/teapot")

    def test_success_passes_through(self):
        client = TestClient(build_app())

        response = client.get("/api/ok")

        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestFrameworkErrors:
    def test_validation_error(self):
        client = TestClient(build_app())

        response = client.post("/api/notes", json={})

        assert response.status_code == 422
        assert response.json() == {"message": "invalid request: body.title: Field required"}

    def test_method_not_allowed(self):
        client = TestClient(build_app())

        response = client.put("/api/ok")

        assert response.status_code == 405
        assert response.json() == {"message": "Method Not Allowed"}
        assert response.headers["allow"] == "GET"

    def test_unknown_route(self):
        client = TestClient(build_app())

        response = client.get("/api/nothing")

        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}


class TestInstall:
    def test_installed_innermost(self):
        app = FastAPI()
        install_error_handler(app)

        assert app.user_middleware[-1].cls is ErrorResponseMiddleware

    def test_install_twice_rejected(self):
        app = FastAPI()
        install_error_handler(app)

        with pytest.raises(RuntimeError):
            install_error_handler(app)
