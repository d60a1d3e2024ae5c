"""Nox sessions for the Use Case Manager quality gate.

Updates:
  v0.3.0 - 2026-10-18 - Collapse to lint/typecheck/test plus a combined ``check`` session.
  v0.2.0 - 2026-09-20 - Cover the web package and measure coverage across all sources.
  v0.1.0 - 2026-08-20 - Ruff/Pyright/Pytest sessions using tools from `.venv`.

Tools are resolved from the project `.venv` (``pip install -e .[dev]``); nox
itself creates no virtualenvs.
"""

from __future__ import annotations

import sys
from pathlib import Path

import nox

nox.options.sessions = ["check"]

SOURCES: tuple[str, ...] = ("main.py", "cli", "config", "core", "models", "web", "tests")
COVERAGE_PACKAGES: tuple[str, ...] = ("core", "cli", "config", "web")


def _tool(session: nox.Session, name: str) -> str:
    bin_dir = Path(".venv") / ("Scripts" if sys.platform == "win32" else "bin")
    executable = bin_dir / (f"{name}.exe" if sys.platform == "win32" else name)
    if not executable.exists():
        session.error(f"{executable} not found; run `pip install -e .[dev]` inside .venv first.")
    return str(executable)


def _run_pytest(session: nox.Session) -> None:
    coverage = [f"--cov={package}" for package in COVERAGE_PACKAGES]
    session.run(
        _tool(session, "pytest"),
        "-n",
        "auto",
        *coverage,
        "--cov-report=term-missing",
        "--cov-fail-under=80",
        *session.posargs,
        external=True,
    )


@nox.session(venv_backend="none")
def lint(session: nox.Session) -> None:
    """Check formatting and lint rules with ruff."""
    ruff = _tool(session, "ruff")
    session.run(ruff, "format", "--check", *SOURCES, external=True)
    session.run(ruff, "check", *SOURCES, external=True)


@nox.session(venv_backend="none")
def typecheck(session: nox.Session) -> None:
    session.run(_tool(session, "pyright"), external=True)


@nox.session(venv_backend="none")
def test(session: nox.Session) -> None:
    """Run the suite in parallel with coverage; extra args go to pytest."""
    _run_pytest(session)


@nox.session(venv_backend="none")
def check(session: nox.Session) -> None:
    """Lint, typecheck, then test."""
    lint(session)
    typecheck(session)
    _run_pytest(session)
