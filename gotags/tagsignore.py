"""Ignore file handling for recursive scans (.gotagsignore + .gitignore).

Uses pathspec for gitignore-compatible pattern matching.

Precedence (highest to lowest):
1. .gotagsignore patterns (explicit include/exclude)
2. .gitignore patterns (via git check-ignore, if in git repo)
3. Default patterns (if no .gotagsignore exists)
"""

from __future__ import annotations

import logging
import os
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathspec import PathSpec

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gotagsignore"

# Used when the project has no .gotagsignore
DEFAULT_TEMPLATE = """\
# gotags ignore patterns (gitignore syntax)

# Dependencies
vendor/
node_modules/

# Test data is not compiled
testdata/

# Version control
.git/
.hg/
.svn/
"""


@lru_cache(maxsize=128)
def is_git_repo(project_dir: str) -> bool:
    """Check if directory is inside a git repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--git-dir"],
            cwd=project_dir,
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        # git not installed, timeout, or other error
        return False


def is_gitignored(file_path: str | Path, project_dir: str | Path) -> bool:
    """Check if a file is ignored by .gitignore using git check-ignore.

    Args:
        file_path: Path to the file to check
        project_dir: Root directory of the git repo

    Returns:
        True if file is gitignored, False otherwise
    """
    project_path = Path(project_dir)
    file_path = Path(file_path)

    try:
        rel_path = file_path.relative_to(project_path)
    except ValueError:
        rel_path = file_path

    try:
        result = subprocess.run(
            ["git", "check-ignore", "-q", str(rel_path)],
            cwd=str(project_path),
            capture_output=True,
            timeout=5,
        )
        # Return code 0 = ignored, 1 = not ignored, 128 = error
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return False


def load_ignore_patterns(project_dir: str | Path) -> "PathSpec":
    """Load ignore patterns from .gotagsignore, or the defaults."""
    import pathspec

    ignore_path = Path(project_dir) / IGNORE_FILE

    if ignore_path.exists():
        patterns = ignore_path.read_text().splitlines()
    else:
        patterns = DEFAULT_TEMPLATE.splitlines()

    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def _has_negation_for_file(spec: "PathSpec", rel_path: str) -> bool:
    """True if a ``!`` pattern in ``spec`` matches ``rel_path``."""
    for pattern in spec.patterns:
        regex = getattr(pattern, "regex", None)
        if pattern.include is False and regex is not None and regex.match(rel_path):
            return True
    return False


def should_ignore(
    file_path: str | Path,
    project_dir: str | Path,
    spec: "PathSpec | None" = None,
    use_gitignore: bool = True,
) -> bool:
    """Check if a file should be left out of the tags file.

    Args:
        file_path: Path to check (absolute or relative)
        project_dir: Root directory of the scan
        spec: Optional pre-loaded PathSpec (for efficiency in loops)
        use_gitignore: Whether to also check .gitignore
    """
    if spec is None:
        spec = load_ignore_patterns(project_dir)

    project_path = Path(project_dir)
    file_path = Path(file_path)

    try:
        rel_path = file_path.relative_to(project_path)
    except ValueError:
        rel_path = file_path

    rel_path_str = rel_path.as_posix()
    ignored = spec.match_file(rel_path_str)

    # An explicit ! pattern in .gotagsignore beats .gitignore
    if _has_negation_for_file(spec, rel_path_str):
        return ignored
    if ignored:
        return True

    if use_gitignore and is_git_repo(str(project_path)):
        return is_gitignored(file_path, project_path)

    return False


def scan_go_files(root: str | Path, use_gitignore: bool = True) -> list[str]:
    """Walk ``root`` in sorted order and return the Go files not ignored."""
    root_path = Path(root)
    spec = load_ignore_patterns(root_path)
    found = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        rel_dir = Path(dirpath).relative_to(root_path)
        # Prune ignored directories before descending
        dirnames[:] = sorted(
            d for d in dirnames
            if not spec.match_file((rel_dir / d).as_posix() + "/")
        )
        for name in sorted(filenames):
            if not name.endswith(".go"):
                continue
            path = Path(dirpath) / name
            if should_ignore(path, root_path, spec, use_gitignore):
                logger.debug(f"Ignoring {path}")
                continue
            found.append(str(path))
    return found
