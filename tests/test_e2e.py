from __future__ import annotations

import json
from pathlib import Path

import pytest

import shadcn_registry.e2e as e2e
from shadcn_registry.catalog import add_item
from shadcn_registry.errors import CommandFailed, NotFound, ServerNotReady, ValidationError
from shadcn_registry.process import CommandResult


class _FakeServer:
    def __init__(self, argv: list[str], cwd: Path) -> None:
        self.argv = argv
        self.cwd = cwd
        self.terminated = False

    def poll(self) -> int | None:
        return None

    def terminate(self) -> None:
        self.terminated = True


class _Recorder:
    """Stands in for the process layer; `shadcn init` writes a components.json like the real CLI."""

    def __init__(self, *, fail_on: str | None = None, ready: bool = True) -> None:
        self.events: list[tuple[str, list[str], Path]] = []
        self.server: _FakeServer | None = None
        self.fail_on = fail_on
        self.ready = ready

    def run_command(self, cmd: list[str], *, cwd: Path, description: str) -> CommandResult:
        del description
        self.events.append(("run", list(cmd), cwd))
        joined = " ".join(cmd)
        if self.fail_on is not None and self.fail_on in joined:
            raise CommandFailed(f"{joined} failed", exit_code=1)
        if "create-next-app@latest" in cmd:
            (cwd / cmd[3]).mkdir(parents=True)
        if cmd[-3:] == ["init", "-y", "-d"]:
            (cwd / "components.json").write_text(
                json.dumps({"style": "new-york", "aliases": {"ui": "@/components/ui"}}), encoding="utf-8"
            )
        return CommandResult(argv=list(cmd), returncode=0, log=[])

    def start_background(self, cmd: list[str], *, cwd: Path, label: str) -> _FakeServer:
        del label
        self.events.append(("start", list(cmd), cwd))
        self.server = _FakeServer(list(cmd), cwd)
        return self.server

    def wait_for_http(self, url: str, *, timeout_seconds: float, process: object = None) -> None:
        del process
        self.events.append(("wait", [url, str(timeout_seconds)], Path()))
        if not self.ready:
            raise ServerNotReady(f"Server at {url} did not respond")


def _install(monkeypatch: pytest.MonkeyPatch, recorder: _Recorder) -> None:
    monkeypatch.setattr(e2e, "run_command", recorder.run_command)
    monkeypatch.setattr(e2e, "start_background", recorder.start_background)
    monkeypatch.setattr(e2e, "wait_for_http", recorder.wait_for_http)


def test_create_test_app_runs_steps_in_order(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, registry_root: Path
) -> None:
    add_item(registry_root, kind="component", name="status-badge", style="new-york")
    add_item(registry_root, kind="hook", name="use-theme", style="new-york")
    recorder = _Recorder()
    _install(monkeypatch, recorder)
    app_folder = tmp_path / "apps" / "test-app"

    result = e2e.create_test_app(
        registry_folder=registry_root,
        app_folder=app_folder,
        package_manager="pnpm",
        port=3002,
        ready_timeout_seconds=15,
    )

    app_path = app_folder.resolve()
    assert [(kind, argv) for kind, argv, _cwd in recorder.events] == [
        ("run", ["pnpm", "install"]),
        ("run", ["pnpm", "run", "registry:build"]),
        ("start", ["pnpm", "run", "dev", "--", "-p", "3002"]),
        ("wait", ["http://localhost:3002", "15"]),
        (
            "run",
            [
                "npx",
                "--yes",
                "create-next-app@latest",
                "test-app",
                "--yes",
                "--ts",
                "--tailwind",
                "--eslint",
                "--app",
                "--use-pnpm",
            ],
        ),
        ("run", ["pnpm", "dlx", "shadcn@latest", "init", "-y", "-d"]),
        ("run", ["pnpm", "dlx", "shadcn@latest", "add", "@acme/status-badge", "@acme/use-theme"]),
    ]
    assert recorder.events[4][2] == app_path.parent
    assert recorder.server is not None and recorder.server.terminated

    components = json.loads((app_path / "components.json").read_text(encoding="utf-8"))
    assert components["registries"] == {"@acme": "http://localhost:3002/r/{name}.json"}
    assert components["aliases"] == {"ui": "@/components/ui"}
    assert result.installed_items == ["status-badge", "use-theme"]
    assert result.registry_name == "acme"


def test_bun_reinstalls_after_create_and_skips_existing_node_modules(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, registry_root: Path
) -> None:
    (registry_root / "node_modules").mkdir()
    recorder = _Recorder()
    _install(monkeypatch, recorder)

    result = e2e.create_test_app(
        registry_folder=registry_root,
        app_folder=tmp_path / "bun-app",
        package_manager="bun",
        port=4010,
        ready_timeout_seconds=5,
    )

    commands = [argv for kind, argv, _cwd in recorder.events if kind == "run"]
    assert commands[0] == ["bun", "run", "registry:build"]
    assert "--use-npm" in commands[1]
    assert commands[2] == ["bun", "install"]
    assert commands[3] == ["bunx", "shadcn@latest", "init", "-y", "-d"]
    assert len(commands) == 4
    assert result.installed_items == []


def test_server_is_stopped_when_a_later_step_fails(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, registry_root: Path
) -> None:
    recorder = _Recorder(fail_on="create-next-app")
    _install(monkeypatch, recorder)

    with pytest.raises(CommandFailed):
        e2e.create_test_app(
            registry_folder=registry_root,
            app_folder=tmp_path / "app",
            package_manager="npm",
            port=3002,
            ready_timeout_seconds=5,
        )

    assert recorder.server is not None and recorder.server.terminated
    assert not any("shadcn@latest" in " ".join(argv) for _k, argv, _c in recorder.events)


def test_server_is_stopped_when_it_never_becomes_ready(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, registry_root: Path
) -> None:
    recorder = _Recorder(ready=False)
    _install(monkeypatch, recorder)

    with pytest.raises(ServerNotReady):
        e2e.create_test_app(
            registry_folder=registry_root,
            app_folder=tmp_path / "app",
            package_manager="npm",
            port=3002,
            ready_timeout_seconds=1,
        )

    assert recorder.server is not None and recorder.server.terminated


def test_rejects_non_empty_app_folder_before_running_anything(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, registry_root: Path
) -> None:
    recorder = _Recorder()
    _install(monkeypatch, recorder)
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "package.json").write_text("{}", encoding="utf-8")

    with pytest.raises(ValidationError, match="not empty"):
        e2e.create_test_app(
            registry_folder=registry_root,
            app_folder=tmp_path / "app",
            package_manager="npm",
            port=3002,
            ready_timeout_seconds=5,
        )
    assert recorder.events == []


def test_rejects_unknown_package_manager_and_missing_registry(tmp_path: Path, registry_root: Path) -> None:
    with pytest.raises(ValidationError, match="--package-manager"):
        e2e.create_test_app(
            registry_folder=registry_root,
            app_folder=tmp_path / "app",
            package_manager="yarn",
            port=3002,
            ready_timeout_seconds=5,
        )
    with pytest.raises(NotFound, match="registry.json"):
        e2e.create_test_app(
            registry_folder=tmp_path / "nowhere",
            app_folder=tmp_path / "app",
            package_manager="npm",
            port=3002,
            ready_timeout_seconds=5,
        )


def test_configure_registry_requires_components_json(tmp_path: Path) -> None:
    with pytest.raises(NotFound, match="components.json"):
        e2e.configure_registry(tmp_path, registry_name="acme", port=3002)
