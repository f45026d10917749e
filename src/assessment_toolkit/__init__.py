"""Top-level package for the Assessment Toolkit.

Provides subpackages:
- assessment_toolkit.core – data models, validation and serialization
- assessment_toolkit.assembly – the constraint-based assembly engine
- assessment_toolkit.common – shared thresholds and label handling
"""


def _get_version() -> str:
    """Get version from importlib.metadata (installed) or pyproject.toml (dev)."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version
    from pathlib import Path

    try:
        return pkg_version("assessment-toolkit")
    except PackageNotFoundError:
        pass

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    try:
        for line in pyproject.read_text().splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")
    except OSError:
        pass
    return "0.0.0"


__version__ = _get_version()

from .assembly import (  # noqa: E402
    AssemblyConfig,
    assemble_test,
    check_content_balance,
    generate_parallel_forms,
    optimize_test_length,
    run_assembly,
)
from .core import Constraint, ConstraintKind, Item  # noqa: E402

__all__: list[str] = [
    "__version__",
    "Item",
    "Constraint",
    "ConstraintKind",
    "AssemblyConfig",
    "assemble_test",
    "generate_parallel_forms",
    "optimize_test_length",
    "check_content_balance",
    "run_assembly",
]
