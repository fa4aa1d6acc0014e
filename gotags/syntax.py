"""
Declaration model handed from the tree provider to the visitor.

The parser reduces a tree-sitter concrete syntax tree to this small,
closed set of node types. Only what tag extraction needs is kept:
names, the line of each name token, and type text for signatures.

Top-level declaration variants (``Decl``):
- ImportDecl
- FuncDecl (methods carry a Receiver)
- TypeDecl, one TypeSpec per declared type
- ValueDecl, for both ``const`` and ``var`` blocks
- BadDecl, anything the parser did not recognize
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Ident:
    name: str
    line: int


@dataclass(frozen=True)
class Param:
    """One parameter declaration: ``a, b int`` or ``xs ...string``."""

    names: tuple[str, ...]
    type: str
    variadic: bool = False


@dataclass(frozen=True)
class Receiver:
    type_name: str  # pointer marker and type arguments stripped
    pointer: bool = False


@dataclass(frozen=True)
class PackageClause:
    name: str
    line: int


@dataclass(frozen=True)
class ImportDecl:
    line: int
    paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class FuncDecl:
    name: Ident
    params: tuple[Param, ...] = ()
    results: tuple[Param, ...] = ()
    # True when the result list was written in parentheses
    results_grouped: bool = False
    receiver: Receiver | None = None


@dataclass(frozen=True)
class FieldSpec:
    """A struct field declaration line.

    ``names`` is empty for an embedded field; ``type`` then holds the
    embedded type as written (``*pkg.Base``).
    """

    names: tuple[Ident, ...]
    type: str
    line: int

    @property
    def embedded(self) -> bool:
        return not self.names


@dataclass(frozen=True)
class MethodSpec:
    name: Ident
    params: tuple[Param, ...] = ()
    results: tuple[Param, ...] = ()
    results_grouped: bool = False


@dataclass(frozen=True)
class StructType:
    fields: tuple[FieldSpec, ...] = ()


@dataclass(frozen=True)
class InterfaceType:
    methods: tuple[MethodSpec, ...] = ()
    embeds: tuple[str, ...] = ()


@dataclass(frozen=True)
class OtherType:
    """Anything that is not a struct or interface literal."""

    text: str


TypeShape = Union[StructType, InterfaceType, OtherType]


@dataclass(frozen=True)
class TypeSpec:
    name: Ident
    shape: TypeShape
    alias: bool = False


@dataclass(frozen=True)
class TypeDecl:
    specs: tuple[TypeSpec, ...] = ()


@dataclass(frozen=True)
class ValueSpec:
    names: tuple[Ident, ...]
    type: str | None = None


@dataclass(frozen=True)
class ValueDecl:
    keyword: str  # "const" or "var"
    specs: tuple[ValueSpec, ...] = ()


@dataclass(frozen=True)
class BadDecl:
    node_type: str
    line: int


Decl = Union[ImportDecl, FuncDecl, TypeDecl, ValueDecl, BadDecl]


@dataclass
class SourceFile:
    """One parsed file: package clause, declarations and raw lines."""

    filename: str
    package: PackageClause | None
    decls: list[Decl] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def line_text(self, line: int) -> str:
        """Return source line ``line`` (1-based), empty when out of range."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""
