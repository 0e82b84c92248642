from __future__ import annotations

import nox


@nox.session(python=["3.10", "3.12"])
def tests(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("pytest", "-q", *session.posargs)


@nox.session(python="3.12")
def property_tests(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("pytest", "-q", "-m", "property", *session.posargs)


@nox.session(python=False)
def mypy(session: nox.Session) -> None:
    session.run("mypy", "src/harvx", *session.posargs)
