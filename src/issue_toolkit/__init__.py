"""Top-level package for the Issue Toolkit.

Provides subpackages:
- issue_toolkit.core – models, schemas and serialization
- issue_toolkit.toc – table-of-contents reconciliation
- issue_toolkit.fragments – fragment cleanup and solution interleaving
- issue_toolkit.sources – PDF page source and throttled reader wrapper
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("issue-toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

from issue_toolkit.core.models import ArticleCandidate, Fragment, IssueMeta, PageRange, SolutionGroup
from issue_toolkit.fragments import interleave_solutions, process_issue_fragments
from issue_toolkit.toc import ReconcileConfig, ReconcileResult, reconcile_issue

__all__: list[str] = [
    "__version__",
    "ArticleCandidate",
    "Fragment",
    "IssueMeta",
    "PageRange",
    "SolutionGroup",
    "ReconcileConfig",
    "ReconcileResult",
    "reconcile_issue",
    "interleave_solutions",
    "process_issue_fragments",
]
