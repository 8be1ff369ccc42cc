import json
import logging

import pytest

from zipserve import main as main_module
from zipserve.core.server_controller import ServerController


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_main_runs_controller_with_cli_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    seen = {}

    def fake_run(self):
        seen["config"] = self.config

    monkeypatch.setattr(ServerController, "run", fake_run)
    assert main_module.main(["--root", str(tmp_path), "--port", "8123"]) == 0
    assert seen["config"].port == 8123
    assert seen["config"].root_directory == tmp_path.resolve()


def test_main_picks_up_config_json_in_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.json").write_text(json.dumps({"port": 8456, "rootDirectory": str(tmp_path)}))
    seen = {}
    monkeypatch.setattr(ServerController, "run", lambda self: seen.setdefault("port", self.config.port))
    assert main_module.main([]) == 0
    assert seen["port"] == 8456


def test_main_reports_configuration_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(ServerController, "run", lambda self: pytest.fail("should not start"))
    assert main_module.main(["--port", "99999"]) == 1


def test_main_rejects_unknown_log_level(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main_module.main(["--log-level", "chatty"]) == 1


def test_main_reports_server_failures(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def broken_run(self):
        raise OSError("address already in use")

    monkeypatch.setattr(ServerController, "run", broken_run)
    assert main_module.main(["--root", str(tmp_path)]) == 1


def test_controller_builds_uvicorn_server(tmp_path):
    from zipserve.core.config import ServerConfig

    controller = ServerController(ServerConfig(root_directory=tmp_path, port=8765, host="127.0.0.1"))
    server = controller.build_server()
    assert server.config.port == 8765
    assert server.config.host == "127.0.0.1"
    assert controller.get_status() == {
        "status": "stopped",
        "port": 8765,
        "root_directory": str(tmp_path.resolve()),
    }
