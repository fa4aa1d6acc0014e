"""
Tag records and their tags-file line format.

A tag line is::

    <name>\t<file>\t/^<source line>$/;"\t<kind>\t<field>:<value>...

Extension fields are written in a fixed order and only when they apply.
"""

from dataclasses import dataclass
from enum import Enum


class TagKind(Enum):
    """Closed set of tag kinds and their one-letter codes."""

    PACKAGE = "p"
    IMPORT = "P"
    FUNCTION = "f"
    METHOD = "m"
    TYPE = "t"
    STRUCT = "s"
    INTERFACE = "i"
    CONSTANT = "c"
    VARIABLE = "v"
    FIELD = "w"
    INTERFACE_METHOD = "n"

    @property
    def code(self) -> str:
        return self.value


# Kinds whose tags name their enclosing type, and the field key used for it.
PARENT_FIELDS = {
    TagKind.FIELD: "struct",
    TagKind.INTERFACE_METHOD: "interface",
}

CALLABLE_KINDS = {TagKind.FUNCTION, TagKind.METHOD, TagKind.INTERFACE_METHOD}


def is_exported(name: str) -> bool:
    """Go visibility rule: exported iff the first character is upper case."""
    return bool(name) and name[0].isupper()


def search_pattern(text: str) -> str:
    """Build a line-anchored ex search pattern for one source line."""
    text = text.rstrip("\r\n")
    escaped = text.replace("\\", "\\\\").replace("/", "\\/")
    return f"/^{escaped}$/"


@dataclass(frozen=True)
class Tag:
    """One declaration's entry in the tags file.

    ``text`` is the full source line of the declaration; it becomes the
    search pattern. ``receiver`` is set for methods only and ``parent``
    for struct fields and interface methods only.
    """

    name: str
    file: str
    line: int
    kind: TagKind
    text: str = ""
    receiver: str = ""
    pointer_receiver: bool = False
    parent: str = ""
    signature: str | None = None
    type: str = ""

    def __post_init__(self):
        assert self.name, "tag name must not be empty"
        assert self.line >= 1, f"{self.name}: line must be 1-based, got {self.line}"
        if self.kind is TagKind.METHOD:
            assert self.receiver, f"method {self.name} has no receiver"
        else:
            assert not self.receiver, f"{self.kind.name.lower()} {self.name} has a receiver"
        if self.kind in PARENT_FIELDS:
            assert self.parent, f"{self.kind.name.lower()} {self.name} has no parent"

    @property
    def exported(self) -> bool:
        return is_exported(self.name)

    @property
    def access(self) -> str:
        return "public" if self.exported else "private"

    def fields(self) -> list[tuple[str, str]]:
        """Extension fields in output order."""
        fields = [("line", str(self.line)), ("access", self.access)]
        if self.kind in PARENT_FIELDS:
            fields.append((PARENT_FIELDS[self.kind], self.parent))
        if self.receiver:
            fields.append(("receiver", self.receiver))
            if self.pointer_receiver:
                fields.append(("pointer", "1"))
        if self.signature is not None and self.kind in CALLABLE_KINDS:
            fields.append(("signature", self.signature))
        if self.type:
            fields.append(("type", self.type))
        return fields

    def __str__(self) -> str:
        return serialize(self)


def serialize(tag: Tag) -> str:
    """Format ``tag`` as one tags-file line."""
    parts = [
        tag.name,
        tag.file,
        search_pattern(tag.text) + ';"',
        tag.kind.code,
    ]
    parts.extend(f"{key}:{value}" for key, value in tag.fields())
    return "\t".join(parts)
