from __future__ import annotations

from pathlib import Path

import pytest

from shadcn_registry.templates import render_registry_manifest


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep config lookups away from the developer's cwd and environment."""
    for name in (
        "SHADCN_REGISTRY_TEMPLATE_URL",
        "SHADCN_REGISTRY_PORT",
        "SHADCN_REGISTRY_READY_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def registry_root(tmp_path: Path) -> Path:
    root = tmp_path / "registry-project"
    root.mkdir()
    (root / "registry.json").write_text(
        render_registry_manifest(registry_name="acme", homepage="https://acme.test", style="new-york"),
        encoding="utf-8",
    )
    return root
