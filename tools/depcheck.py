from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

SRC_ROOT = Path(__file__).resolve().parents[1] / "src" / "mop"

# Pricing, availability and lifecycle rules stay free of frameworks and adapters.
DOMAIN_FORBIDDEN = frozenset(
    {
        "fastapi",
        "starlette",
        "pydantic",
        "sqlalchemy",
        "redis",
        "httpx",
        "requests",
        "opentelemetry",
        "prometheus_client",
        "mop.api",
        "mop.infrastructure",
        "mop.application",
    }
)

# Use cases may shape DTOs and record metrics, but never reach for storage or HTTP.
APPLICATION_FORBIDDEN = frozenset(
    {
        "fastapi",
        "starlette",
        "sqlalchemy",
        "redis",
        "httpx",
        "requests",
        "mop.api",
        "mop.infrastructure",
    }
)

LAYER_POLICIES: Mapping[str, tuple[Path, frozenset[str]]] = {
    "domain": (SRC_ROOT / "domain", DOMAIN_FORBIDDEN),
    "application": (SRC_ROOT / "application", APPLICATION_FORBIDDEN),
}


@dataclass(frozen=True)
class Violation:
    file_path: Path
    line: int
    module: str


def _python_files(root: Path) -> Iterable[Path]:
    if root.is_file() and root.suffix == ".py":
        yield root
        return
    if root.is_dir():
        yield from sorted(root.rglob("*.py"))


def _matches_forbidden(module: str, forbidden_modules: frozenset[str]) -> bool:
    return any(
        module == forbidden or module.startswith(f"{forbidden}.")
        for forbidden in forbidden_modules
    )


def _imported_modules(tree: ast.AST) -> Iterable[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.lineno, node.module


def _scan_file(file_path: Path, forbidden_modules: frozenset[str]) -> list[Violation]:
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    return [
        Violation(file_path=file_path, line=line, module=module)
        for line, module in _imported_modules(tree)
        if _matches_forbidden(module, forbidden_modules)
    ]


def find_violations(
    paths: Sequence[Path],
    forbidden_modules: frozenset[str] = DOMAIN_FORBIDDEN,
) -> list[Violation]:
    violations: list[Violation] = []
    for path in paths:
        for file_path in _python_files(path):
            violations.extend(_scan_file(file_path, forbidden_modules))
    return violations


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Layer import policy check for src/mop.")
    parser.add_argument(
        "--layer",
        choices=sorted(LAYER_POLICIES),
        action="append",
        default=[],
        help="Layer policy to enforce (repeatable). Defaults to every layer.",
    )
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Scan these paths with the selected policy instead of the layer's source tree.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    layers = args.layer or list(LAYER_POLICIES)
    if args.path and not args.layer:
        layers = ["domain"]

    violations: list[Violation] = []
    for layer in layers:
        default_path, forbidden_modules = LAYER_POLICIES[layer]
        scan_paths = [Path(item) for item in args.path] if args.path else [default_path]
        violations.extend(find_violations(scan_paths, forbidden_modules))

    if not violations:
        print("depcheck passed")
        return 0

    print("depcheck failed: forbidden imports detected")
    for violation in violations:
        print(f"{violation.file_path}:{violation.line} -> {violation.module}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
