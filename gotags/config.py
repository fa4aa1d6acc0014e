"""Program identification and run options.

Both are immutable values built once and handed to the collector
explicitly; nothing here is mutated at runtime.
"""

import os
from dataclasses import dataclass

VERSION = "1.2.0"

# File size limit - tree-sitter memory usage is ~10-200x file size
# override with GOTAGS_MAX_FILE_SIZE
DEFAULT_MAX_FILE_SIZE = 5_000_000  # 5MB
MAX_FILE_SIZE = int(os.environ.get("GOTAGS_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE))


@dataclass(frozen=True)
class ProgramInfo:
    """Values written into the !_TAG_PROGRAM_* meta-lines."""

    name: str = "gotags"
    version: str = VERSION
    url: str = "https://github.com/jstemmer/gotags"
    author_name: str = "gotags contributors"
    author_email: str = ""


@dataclass(frozen=True)
class TagsOptions:
    """Options consulted by the collector.

    sort_output: sort tag lines (meta-lines always stay on top)
    silent: do not report per-file parse errors
    package_tags: emit a tag for each file's package clause
    """

    sort_output: bool = True
    silent: bool = False
    package_tags: bool = False


DEFAULT_PROGRAM = ProgramInfo()
