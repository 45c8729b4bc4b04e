import importlib
import json
import os
import sys

import pytest

# We import run.py as a module and exercise parse_args + main with a patched
# start_server so we do not actually start networking.


@pytest.fixture()
def run_module():
    # Ensure a clean import each time
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


@pytest.fixture()
def fake_server(monkeypatch):
    calls = {}

    def fake_start_server(host, port, debug):  # signature match
        calls["called"] = True
        calls["host"] = host
        calls["port"] = port
        calls["debug"] = debug

    import delve.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    return calls


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "Delve" in out


def test_default_command_is_server(run_module):
    ns = run_module.parse_args([])
    assert ns.command == "server"


def test_generate_args(run_module):
    ns = run_module.parse_args(["generate", "--seed", "3", "--width", "30", "--min-rooms", "2"])
    assert ns.command == "generate"
    assert (ns.seed, ns.width, ns.height, ns.min_rooms, ns.max_rooms) == (3, 30, 60, 2, 10)


def test_server_main_invokes_start_server(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    assert run_module.main(["server"]) == 0
    assert fake_server == {"called": True, "host": "127.0.0.1", "port": 5555, "debug": False}


def test_server_flags_beat_env(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    run_module.main(["server", "--port", "6000", "--host", "localhost", "--debug"])
    assert fake_server["port"] == 6000
    assert fake_server["host"] == "localhost"
    assert fake_server["debug"] is True


def test_env_file_argument(monkeypatch, tmp_path, run_module, fake_server):
    # Private environ copy so values loaded from the file do not leak into other tests
    env = {k: v for k, v in os.environ.items() if k not in ("HOST", "PORT")}
    monkeypatch.setattr(os, "environ", env)
    env_file = tmp_path / ".env"
    env_file.write_text("HOST=0.0.0.0\nPORT=6001\n")
    run_module.main(["--env-file", str(env_file), "server"])
    assert fake_server["port"] == 6001


def test_generate_prints_map(run_module, capsys):
    assert run_module.main(["generate", "--seed", "42", "--width", "30", "--height", "20"]) == 0
    out = capsys.readouterr().out
    rows = out.splitlines()[:20]
    assert all(len(r) == 30 for r in rows)
    assert any("S" in r for r in rows)
    assert "Seed:" in out and "42" in out


def test_generate_json(run_module, capsys):
    run_module.main(["generate", "--seed", "8", "--width", "25", "--height", "25", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 8 and data["width"] == 25


def test_cave_command(run_module, capsys):
    assert run_module.main(["cave", "--seed", "4", "--width", "30", "--height", "20", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["kind"] == "cave"


def test_path_command(run_module, capsys):
    code = run_module.main(["path", "--seed", "42", "--width", "40", "--height", "40", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["status"] == "found" and data["path"]


def test_path_command_unreachable_exits_nonzero(run_module, capsys):
    # (0, 0) is always border wall
    code = run_module.main(["path", "--seed", "42", "--from", "0", "0", "--to", "5", "5"])
    assert code == 1
    assert "invalid_endpoint" in capsys.readouterr().out


def test_colorize_passthrough_without_tty(run_module):
    run_module._COLOR_ENABLED = False
    assert run_module.colorize("#.\n+S") == "#.\n+S"
