import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]

# Packages with C extensions that must be rebuilt per Python version.
# Poetry's wheel cache can serve a .so compiled for the wrong interpreter.
_C_EXT_PACKAGES = ["psycopg2-binary"]


def _install(session: nox.Session) -> None:
    """Install the project with all test extras into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--with",
        "test",
        "--all-extras",
        external=True,
    )
    # Force-rebuild C-extension packages so the .so matches this Python version.
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
@nox.parametrize("layer", ["domain", "application", "integration", "bdd"])
def tests_layer(session: nox.Session, layer: str) -> None:
    """Run one test layer across every context, selected by the directory markers."""
    _install(session)
    session.run("pytest", "-m", layer, *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
@nox.parametrize("context", ["identity", "catalogue", "ordering"])
def tests_context(session: nox.Session, context: str) -> None:
    """Run every test of a single bounded context."""
    _install(session)
    session.run("pytest", f"tests/{context}/", *session.posargs)
