from __future__ import annotations

import subprocess
import sys
from pathlib import Path

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "tools" / "depcheck.py"


def _run(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, str(SCRIPT_PATH), *args],
        capture_output=True,
        text=True,
        check=False,
    )


def test_depcheck_fails_on_forbidden_import(tmp_path: Path) -> None:
    domain_dir = tmp_path / "domain"
    domain_dir.mkdir(parents=True, exist_ok=True)

    violating_file = domain_dir / "model.py"
    violating_file.write_text("import sqlalchemy\n", encoding="utf-8")

    result = _run("--path", str(domain_dir))

    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0
    assert "sqlalchemy" in combined_output
    assert str(violating_file) in combined_output


def test_domain_may_not_import_application_layer(tmp_path: Path) -> None:
    violating_file = tmp_path / "pricing.py"
    violating_file.write_text(
        "from mop.application.ports.clock import Clock\n",
        encoding="utf-8",
    )

    result = _run("--layer", "domain", "--path", str(violating_file))

    assert result.returncode == 1
    assert f"{violating_file}:1 -> mop.application.ports.clock" in result.stdout


def test_application_layer_allows_pydantic_but_not_redis(tmp_path: Path) -> None:
    app_dir = tmp_path / "application"
    app_dir.mkdir()
    (app_dir / "dto.py").write_text("from pydantic import BaseModel\n", encoding="utf-8")
    (app_dir / "cache.py").write_text("import redis.asyncio\n", encoding="utf-8")

    result = _run("--layer", "application", "--path", str(app_dir))

    assert result.returncode == 1
    assert "redis.asyncio" in result.stdout
    assert "pydantic" not in result.stdout


def test_source_tree_respects_layer_policies() -> None:
    result = _run()

    assert result.returncode == 0, result.stdout
    assert "depcheck passed" in result.stdout
