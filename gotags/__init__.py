"""Generate ctags-compatible tag files for Go source."""

from .collector import collect, meta_tags, run, sort_lines
from .config import DEFAULT_PROGRAM, VERSION, ProgramInfo, TagsOptions
from .parser import FileTooLargeError, GoParser, ParseError
from .tags import Tag, TagKind, serialize
from .visitor import extract

__version__ = VERSION

__all__ = [
    "DEFAULT_PROGRAM",
    "FileTooLargeError",
    "GoParser",
    "ParseError",
    "ProgramInfo",
    "Tag",
    "TagKind",
    "TagsOptions",
    "collect",
    "extract",
    "meta_tags",
    "run",
    "serialize",
    "sort_lines",
]
