import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app  # noqa: E402
from delve.routes.dungeon_api import clear_dungeon_cache  # noqa: E402


@pytest.fixture()
def test_app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "DELVE_DEFAULT_WIDTH": 40,
            "DELVE_DEFAULT_HEIGHT": 40,
            "DELVE_DEFAULT_MIN_ROOMS": 4,
            "DELVE_DEFAULT_MAX_ROOMS": 6,
        }
    )
    app.instance_path = str(tmp_path)
    clear_dungeon_cache()
    yield app
    clear_dungeon_cache()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _quiet_structured_logs(monkeypatch):
    # Generation emits debug/warn records; keep test output readable
    monkeypatch.setenv("DELVE_LOG_LEVEL", "error")


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "performance: generation/search timing guardrails")
