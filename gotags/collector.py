"""
Collect tags across files and produce the tags file lines.

Files are processed one at a time in input order. A file that fails to
parse contributes no tags; the run carries on with the next file.
"""

import logging
from collections.abc import Iterable

from .config import DEFAULT_PROGRAM, ProgramInfo, TagsOptions
from .parser import GoParser, ParseError
from .tags import Tag, serialize
from .visitor import extract

logger = logging.getLogger(__name__)


def meta_tags(program: ProgramInfo, sorted_output: bool) -> list[str]:
    """Return the six !_TAG_ header lines, in their fixed order."""
    return [
        "!_TAG_FILE_FORMAT\t2\t",
        f"!_TAG_FILE_SORTED\t{int(sorted_output)}\t/0=unsorted, 1=sorted/",
        f"!_TAG_PROGRAM_AUTHOR\t{program.author_name}\t/{program.author_email}/",
        f"!_TAG_PROGRAM_NAME\t{program.name}\t",
        f"!_TAG_PROGRAM_URL\t{program.url}\t",
        f"!_TAG_PROGRAM_VERSION\t{program.version}\t",
    ]


def sort_lines(lines: Iterable[str]) -> list[str]:
    """Stable sort by code point, which matches byte order for UTF-8."""
    return sorted(lines)


def collect(
    files: Iterable[str],
    parser: GoParser | None = None,
    options: TagsOptions | None = None,
) -> tuple[list[Tag], list[ParseError]]:
    """Parse and visit each file in order.

    Returns:
        Tuple of (tags in traversal order, parse errors in input order)
    """
    parser = parser or GoParser()
    options = options or TagsOptions()
    tags: list[Tag] = []
    errors: list[ParseError] = []

    for filename in files:
        try:
            tree = parser.parse_file(filename)
        except ParseError as e:
            errors.append(e)
            logger.debug(f"Skipping {filename}: {e}")
            if not options.silent:
                logger.warning(f"parse error: {e}")
            continue
        file_tags = extract(tree, filename, package_tags=options.package_tags)
        logger.debug(f"{filename}: {len(file_tags)} tags")
        tags.extend(file_tags)

    return tags, errors


def run(
    files: Iterable[str],
    options: TagsOptions | None = None,
    program: ProgramInfo = DEFAULT_PROGRAM,
    parser: GoParser | None = None,
) -> list[str]:
    """Build the complete tags file: meta-lines, then (sorted) tag lines."""
    options = options or TagsOptions()
    tags, _ = collect(files, parser, options)
    lines = [serialize(tag) for tag in tags]
    if options.sort_output:
        lines = sort_lines(lines)
    return meta_tags(program, options.sort_output) + lines
