"""
Declaration visitor: turn one parsed file into tags.

Walks the top-level declarations in source order and, one level down,
the members of struct and interface types. Function bodies are never
entered. Declarations the visitor does not recognize produce no tags.
"""

import logging

from .syntax import (
    BadDecl,
    Decl,
    FuncDecl,
    ImportDecl,
    InterfaceType,
    OtherType,
    Param,
    SourceFile,
    StructType,
    TypeDecl,
    TypeSpec,
    ValueDecl,
)
from .tags import Tag, TagKind

logger = logging.getLogger(__name__)

BLANK = "_"


def render_params(params: tuple[Param, ...]) -> list[str]:
    """One type entry per declared name; unnamed params count once."""
    types = []
    for param in params:
        type_text = "..." + param.type if param.variadic else param.type
        types.extend([type_text] * max(len(param.names), 1))
    return types


def render_signature(params: tuple[Param, ...], results: tuple[Param, ...], grouped: bool) -> str:
    """Render ``(int, int) int`` / ``(string) (int, error)`` style summaries."""
    signature = "(" + ", ".join(render_params(params)) + ")"
    result_types = render_params(results)
    if not result_types:
        return signature
    if grouped or len(result_types) > 1:
        return f"{signature} (" + ", ".join(result_types) + ")"
    return f"{signature} {result_types[0]}"


def embedded_name(type_text: str) -> str:
    """Field name of an embedded type: ``*pkg.Base[T]`` -> ``Base``."""
    name = type_text.lstrip("*").split("[", 1)[0]
    return name.rsplit(".", 1)[-1].strip()


class DeclarationVisitor:
    """Produce the tags for one ``SourceFile``."""

    def __init__(self, tree: SourceFile, filename: str, package_tags: bool = False):
        self.tree = tree
        self.filename = filename
        self.package_tags = package_tags

    def _tag(self, name: str, line: int, kind: TagKind, **fields) -> Tag:
        return Tag(
            name=name,
            file=self.filename,
            line=line,
            kind=kind,
            text=self.tree.line_text(line),
            **fields,
        )

    def visit(self) -> list[Tag]:
        tags: list[Tag] = []
        package = self.tree.package
        if self.package_tags and package is not None:
            tags.append(self._tag(package.name, package.line, TagKind.PACKAGE))
        for decl in self.tree.decls:
            tags.extend(self.visit_decl(decl))
        return tags

    def visit_decl(self, decl: Decl) -> list[Tag]:
        """Dispatch on the declaration variant; unknown shapes yield nothing."""
        if isinstance(decl, FuncDecl):
            return self.visit_func(decl)
        if isinstance(decl, TypeDecl):
            return [tag for spec in decl.specs for tag in self.visit_type_spec(spec)]
        if isinstance(decl, ValueDecl):
            return self.visit_values(decl)
        if isinstance(decl, ImportDecl):
            return []
        if isinstance(decl, BadDecl):
            logger.debug(f"{self.filename}:{decl.line}: skipping {decl.node_type}")
            return []
        logger.debug(f"{self.filename}: unhandled declaration {type(decl).__name__}")
        return []

    def visit_func(self, decl: FuncDecl) -> list[Tag]:
        name = decl.name.name
        if not name or name == BLANK:
            return []
        signature = render_signature(decl.params, decl.results, decl.results_grouped)
        if decl.receiver is None:
            return [self._tag(name, decl.name.line, TagKind.FUNCTION, signature=signature)]
        if not decl.receiver.type_name:
            return []
        return [self._tag(
            name,
            decl.name.line,
            TagKind.METHOD,
            receiver=decl.receiver.type_name,
            pointer_receiver=decl.receiver.pointer,
            signature=signature,
        )]

    def visit_type_spec(self, spec: TypeSpec) -> list[Tag]:
        name = spec.name.name
        if not name or name == BLANK:
            return []
        shape = spec.shape
        if isinstance(shape, StructType):
            tags = [self._tag(name, spec.name.line, TagKind.STRUCT)]
            tags.extend(self.visit_struct_fields(name, shape))
            return tags
        if isinstance(shape, InterfaceType):
            tags = [self._tag(name, spec.name.line, TagKind.INTERFACE)]
            tags.extend(self.visit_interface_methods(name, shape))
            return tags
        if isinstance(shape, OtherType):
            return [self._tag(name, spec.name.line, TagKind.TYPE, type=shape.text)]
        return []

    def visit_struct_fields(self, parent: str, struct: StructType) -> list[Tag]:
        tags = []
        for field in struct.fields:
            if field.embedded:
                name = embedded_name(field.type)
                if name:
                    tags.append(self._tag(name, field.line, TagKind.FIELD, parent=parent, type=field.type))
                continue
            for ident in field.names:
                if ident.name == BLANK:
                    continue
                tags.append(self._tag(ident.name, ident.line, TagKind.FIELD, parent=parent, type=field.type))
        return tags

    def visit_interface_methods(self, parent: str, interface: InterfaceType) -> list[Tag]:
        tags = []
        for method in interface.methods:
            if not method.name.name:
                continue
            tags.append(self._tag(
                method.name.name,
                method.name.line,
                TagKind.INTERFACE_METHOD,
                parent=parent,
                signature=render_signature(method.params, method.results, method.results_grouped),
            ))
        return tags

    def visit_values(self, decl: ValueDecl) -> list[Tag]:
        kind = TagKind.CONSTANT if decl.keyword == "const" else TagKind.VARIABLE
        tags = []
        for spec in decl.specs:
            for ident in spec.names:
                if not ident.name or ident.name == BLANK:
                    continue
                tags.append(self._tag(ident.name, ident.line, kind, type=spec.type or ""))
        return tags


def extract(tree: SourceFile, filename: str | None = None, package_tags: bool = False) -> list[Tag]:
    """Return the tags for every package- and type-scope declaration in ``tree``.

    Args:
        tree: Parsed file from ``GoParser``
        filename: Path written into each tag; defaults to ``tree.filename``
        package_tags: Also emit a tag for the package clause
    """
    return DeclarationVisitor(tree, filename or tree.filename, package_tags).visit()
