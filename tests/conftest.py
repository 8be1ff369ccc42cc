import pytest
from fastapi.testclient import TestClient

from zipserve.api_server.api import create_api_app
from zipserve.core.config import ServerConfig


@pytest.fixture
def served_root(tmp_path):
    """a.txt plus a sub directory holding x.txt and y/z.txt."""
    root = tmp_path / "served"
    root.mkdir()
    (root / "a.txt").write_bytes(b"hello from a\n")
    sub = root / "sub"
    (sub / "y").mkdir(parents=True)
    (sub / "x.txt").write_bytes(b"x" * 5000)
    (sub / "y" / "z.txt").write_bytes(b"zzz\n")
    return root


@pytest.fixture
def make_client():
    def _make(root):
        app = create_api_app(ServerConfig(root_directory=root))
        return TestClient(app)
    return _make


@pytest.fixture
def client(served_root, make_client):
    return make_client(served_root)
