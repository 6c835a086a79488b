"""Tests for the startup orchestrator.

Covers:
- strict phase order in development and production
- fatal phases stop the sequence before listening
- sample seeding failure is tolerated
- the asset catch-all never shadows API routes
"""

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ecoquest.api.routes import register_routes
from ecoquest.bootstrap import BootError, BootPhase, StartupOrchestrator
from ecoquest.infra.config import Settings
from ecoquest.main import build_orchestrator, create_app
from ecoquest.seeding import SeedCoordinator, SeedOutcome, SeedResult
from ecoquest.web.assets import serve_static_assets


def make_settings(env: str = "development", **overrides) -> Settings:
    return Settings(ENV=env, HOST="0.0.0.0", PORT=5055, **overrides)


class Recorder:
    """Records every collaborator call in order."""

    def __init__(self, fail_at=None, sample_error=None):
        self.events = []
        self.fail_at = fail_at
        self.sample_error = sample_error
        self.server = object()
        self.listened = None

    def _maybe_fail(self, name):
        if self.fail_at == name:
            raise RuntimeError(f"{name} exploded")

    def init_persistence(self):
        self.events.append("init")
        self._maybe_fail("init")

    async def ensure_schema(self):
        self.events.append("schema")
        self._maybe_fail("schema")

    async def ensure_admin_account(self):
        self.events.append("admin")
        self._maybe_fail("admin")
        return True

    async def register_routes(self, app):
        self.events.append("routes")
        self._maybe_fail("routes")
        return self.server

    def install_error_handler(self, app):
        self.events.append("error_handler")

    async def setup_dev_pipeline(self, app, server):
        assert server is self.server
        self.events.append("dev_pipeline")
        self._maybe_fail("dev_pipeline")

    def serve_static_assets(self, app):
        self.events.append("static")
        self._maybe_fail("static")

    async def ensure_sample_data(self, owner_id, sample_set):
        self.events.append("samples")
        if self.sample_error is not None:
            raise self.sample_error
        return SeedResult(SeedOutcome.SEEDED, created=len(sample_set))

    async def listen(self, server, host, port):
        self.events.append("listen")
        self.listened = (server, host, port)


def make_orchestrator(rec: Recorder, cfg: Settings, with_samples: bool = True) -> StartupOrchestrator:
    return StartupOrchestrator(
        FastAPI(),
        cfg,
        init_persistence=rec.init_persistence,
        seeder=rec,
        register_routes=rec.register_routes,
        setup_dev_pipeline=rec.setup_dev_pipeline,
        serve_static_assets=rec.serve_static_assets,
        listen=rec.listen,
        sample_seeder=rec if with_samples else None,
        error_handler_installer=rec.install_error_handler,
    )


class TestPhaseOrder:
    def test_development_sequence(self):
        rec = Recorder()
        orch = make_orchestrator(rec, make_settings("development"))

        report = asyncio.run(orch.run())

        assert rec.events == [
            "init",
            "schema",
            "admin",
            "routes",
            "error_handler",
            "dev_pipeline",
            "samples",
            "listen",
        ]
        assert report.completed == list(BootPhase)
        assert report.sample_result.outcome is SeedOutcome.SEEDED
        assert rec.listened == (rec.server, "0.0.0.0", 5055)

    def test_production_sequence(self):
        rec = Recorder()
        orch = make_orchestrator(rec, make_settings("production"))

        asyncio.run(orch.run())

        assert rec.events == ["init", "schema", "admin", "routes", "error_handler", "static", "listen"]

    def test_development_without_sample_seeder(self):
        rec = Recorder()
        orch = make_orchestrator(rec, make_settings("development"), with_samples=False)

        report = asyncio.run(orch.run())

        assert "samples" not in rec.events
        assert report.sample_result is None

    def test_run_twice_rejected(self):
        rec = Recorder()
        orch = make_orchestrator(rec, make_settings("production"))
        asyncio.run(orch.run())

        with pytest.raises(BootError):
            asyncio.run(orch.run())

        assert rec.events.count("listen") == 1


class TestFailures:
    @pytest.mark.parametrize(
        "fail_at, phase",
        [
            ("init", BootPhase.PERSISTENCE_INIT),
            ("schema", BootPhase.SEEDING),
            ("admin", BootPhase.SEEDING),
            ("routes", BootPhase.ROUTE_REGISTRATION),
            ("dev_pipeline", BootPhase.ASSET_SERVING_SETUP),
        ],
    )
    def test_fatal_phase_never_listens(self, fail_at, phase):
        rec = Recorder(fail_at=fail_at)
        orch = make_orchestrator(rec, make_settings("development"))

        with pytest.raises(BootError) as exc_info:
            asyncio.run(orch.run())

        assert exc_info.value.phase is phase
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "listen" not in rec.events
        assert rec.events[-1] == fail_at

    def test_missing_static_dir_is_fatal(self, tmp_path):
        rec = Recorder()
        orch = StartupOrchestrator(
            FastAPI(),
            make_settings("production"),
            init_persistence=rec.init_persistence,
            seeder=rec,
            register_routes=rec.register_routes,
            setup_dev_pipeline=rec.setup_dev_pipeline,
            serve_static_assets=lambda app: serve_static_assets(app, static_dir=str(tmp_path / "nope")),
            listen=rec.listen,
        )

        with pytest.raises(BootError) as exc_info:
            asyncio.run(orch.run())

        assert exc_info.value.phase is BootPhase.ASSET_SERVING_SETUP
        assert "listen" not in rec.events

    def test_sample_failure_is_not_fatal(self):
        rec = Recorder(sample_error=RuntimeError("no such table"))
        orch = make_orchestrator(rec, make_settings("development"))

        report = asyncio.run(orch.run())

        assert rec.events[-1] == "listen"
        assert report.sample_result.outcome is SeedOutcome.FAILED
        assert "no such table" in report.sample_result.reason


class TestCatchAllOrdering:
    @pytest.fixture
    def dist(self, tmp_path):
        dist = tmp_path / "public"
        dist.mkdir()
        (dist / "index.html").write_text("<html>eco</html>")
        return dist

    def test_api_routes_win_over_static_catch_all(self, storage, dist):
        rec = Recorder()
        app = FastAPI()
        orch = StartupOrchestrator(
            app,
            make_settings("production"),
            init_persistence=rec.init_persistence,
            seeder=SeedCoordinator(storage, admin_username="admin", admin_password="pw", development=False),
            register_routes=register_routes,
            setup_dev_pipeline=rec.setup_dev_pipeline,
            serve_static_assets=lambda a: serve_static_assets(a, static_dir=str(dist)),
            listen=rec.listen,
        )
        asyncio.run(orch.run())
        client = TestClient(app)

        assert client.get("/api/health").json() == {"status": "ok"}
        assert len(client.get("/api/games").json()["games"]) == 15
        assert client.get("/api/games/ocean-cleanup").json()["name"] == "Ocean Cleanup"

        unknown = client.get("/api/does-not-exist")
        assert unknown.status_code == 404
        assert unknown.json() == {"message": "Not Found"}

        page = client.get("/classroom/tasks")
        assert page.status_code == 200
        assert "eco" in page.text


class TestMainWiring:
    def test_create_app_installs_diagnostics(self):
        from ecoquest.common.middlewares import DiagnosticMiddleware

        app = create_app(make_settings())

        assert [m.cls for m in app.user_middleware] == [DiagnosticMiddleware]

    def test_sample_seeder_only_in_development(self):
        dev = build_orchestrator(FastAPI(), make_settings("development"))
        prod = build_orchestrator(FastAPI(), make_settings("production"))

        assert dev._sample_seeder is dev.seeder
        assert prod._sample_seeder is None
