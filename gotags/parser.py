"""
Go syntax tree provider built on tree-sitter.

Parses one file with tree-sitter-go and reduces the concrete syntax
tree to the declaration model in ``gotags.syntax``. A file that does
not parse cleanly is rejected as a whole with ParseError; anything
inside a clean tree that the converter does not understand becomes a
BadDecl and is left for the visitor to skip.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .config import MAX_FILE_SIZE
from .syntax import (
    BadDecl,
    Decl,
    FieldSpec,
    FuncDecl,
    Ident,
    ImportDecl,
    InterfaceType,
    MethodSpec,
    OtherType,
    PackageClause,
    Param,
    Receiver,
    SourceFile,
    StructType,
    TypeDecl,
    TypeSpec,
    ValueDecl,
    ValueSpec,
)

logger = logging.getLogger(__name__)

# Check tree-sitter availability
TREE_SITTER_GO_AVAILABLE = False
try:
    from tree_sitter import Language, Parser
    import tree_sitter_go

    TREE_SITTER_GO_AVAILABLE = True
except ImportError:
    pass


class ParseError(Exception):
    """Raised when a file cannot be turned into a syntax tree."""

    def __init__(self, filename: str, message: str, line: int = 0, column: int = 0):
        self.filename = filename
        self.line = line
        self.column = column
        self.message = message
        if line:
            super().__init__(f"{filename}:{line}:{column}: {message}")
        else:
            super().__init__(f"{filename}: {message}")


class FileTooLargeError(ParseError):
    """Raised when a file exceeds MAX_FILE_SIZE."""

    def __init__(self, filename: str, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            filename,
            f"file is {size:,} bytes, exceeds limit of {limit:,} bytes. "
            f"Set GOTAGS_MAX_FILE_SIZE environment variable to increase limit.",
        )


# Node types of struct/interface literals; every other type is "other".
STRUCT_NODE = "struct_type"
INTERFACE_NODE = "interface_type"

# Grammar versions disagree on interface element names.
INTERFACE_METHOD_NODES = {"method_elem", "method_spec"}
INTERFACE_EMBED_NODES = {"type_elem", "interface_type_name", "constraint_elem", "qualified_type", "type_identifier"}


def _row(node) -> int:
    return node.start_point[0] + 1


def _compact(text: str) -> str:
    return " ".join(text.split())


class GoParser:
    """Parse Go files into ``SourceFile`` declaration trees."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE):
        self.max_file_size = max_file_size
        self._ts_parser: Any = None

    def _safe_decode(self, data: bytes) -> str:
        """Safely decode bytes to string, replacing invalid UTF-8."""
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return data.decode("utf-8", errors="replace")

    def _get_go_parser(self) -> Any:
        """Get or create Go tree-sitter parser."""
        if self._ts_parser is None:
            if not TREE_SITTER_GO_AVAILABLE:
                raise RuntimeError("tree-sitter and tree-sitter-go are required to parse Go source")
            parser = Parser()
            parser.language = Language(tree_sitter_go.language())
            self._ts_parser = parser
        return self._ts_parser

    def parse_file(self, filename: str) -> SourceFile:
        """Read and parse ``filename``; ``-`` reads from stdin."""
        if filename == "-":
            source = sys.stdin.buffer.read()
        else:
            path = Path(filename)
            try:
                size = path.stat().st_size
            except OSError as e:
                raise ParseError(filename, e.strerror or str(e)) from e
            if size > self.max_file_size:
                raise FileTooLargeError(filename, size, self.max_file_size)
            try:
                source = path.read_bytes()
            except OSError as e:
                raise ParseError(filename, e.strerror or str(e)) from e
        return self.parse_source(source, filename)

    def parse_source(self, source: bytes | str, filename: str = "<source>") -> SourceFile:
        """Parse Go source text into a ``SourceFile``."""
        if isinstance(source, str):
            source = source.encode("utf-8")
        if len(source) > self.max_file_size:
            raise FileTooLargeError(filename, len(source), self.max_file_size)

        parser = self._get_go_parser()
        try:
            tree = parser.parse(source)
        except Exception as e:
            logger.error(f"Tree-sitter parse failed for {filename}: {e}")
            raise ParseError(filename, str(e)) from e

        root = tree.root_node
        if root.has_error:
            bad = self._first_error(root)
            if bad is None:
                raise ParseError(filename, "syntax error")
            what = f"missing {bad.type}" if bad.is_missing else "syntax error"
            raise ParseError(filename, what, bad.start_point[0] + 1, bad.start_point[1] + 1)

        package = None
        decls: list[Decl] = []
        for child in root.named_children:
            if child.type == "comment":
                continue
            if child.type == "package_clause":
                package = self._convert_package(child)
                continue
            decls.append(self._convert_decl(child))

        if package is None:
            raise ParseError(filename, "expected 'package' clause", 1, 1)

        logger.debug(f"Parsed {filename}: package {package.name}, {len(decls)} declarations")
        return SourceFile(
            filename=filename,
            package=package,
            decls=decls,
            lines=self._safe_decode(source).split("\n"),
        )

    def _first_error(self, node) -> Any:
        """Depth-first search for the first ERROR or MISSING node."""
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._first_error(child)
                if found is not None:
                    return found
        return None

    def _text(self, node) -> str:
        return self._safe_decode(node.text)

    # === Top-level declarations ===

    def _convert_package(self, node) -> PackageClause | None:
        for child in node.named_children:
            if child.type in ("package_identifier", "identifier"):
                return PackageClause(name=self._text(child), line=_row(child))
        return None

    def _convert_decl(self, node) -> Decl:
        node_type = node.type
        converted: Decl | None = None

        if node_type == "import_declaration":
            converted = self._convert_import(node)
        elif node_type == "function_declaration":
            converted = self._convert_function(node)
        elif node_type == "method_declaration":
            converted = self._convert_method(node)
        elif node_type == "type_declaration":
            converted = self._convert_type_decl(node)
        elif node_type == "const_declaration":
            converted = ValueDecl(keyword="const", specs=self._convert_value_specs(node, "const_spec"))
        elif node_type == "var_declaration":
            converted = ValueDecl(keyword="var", specs=self._convert_value_specs(node, "var_spec"))

        if converted is None:
            logger.debug(f"Unrecognized declaration {node_type} at line {_row(node)}")
            return BadDecl(node_type=node_type, line=_row(node))
        return converted

    def _convert_import(self, node) -> ImportDecl:
        paths = []
        for spec in self._descendants_of_type(node, "import_spec"):
            path = spec.child_by_field_name("path")
            if path is not None:
                paths.append(self._text(path).strip('"`'))
        return ImportDecl(line=_row(node), paths=tuple(paths))

    def _convert_function(self, node) -> FuncDecl | None:
        name = node.child_by_field_name("name")
        if name is None:
            return None
        results, grouped = self._convert_result(node.child_by_field_name("result"))
        return FuncDecl(
            name=Ident(self._text(name), _row(name)),
            params=self._convert_params(node.child_by_field_name("parameters")),
            results=results,
            results_grouped=grouped,
        )

    def _convert_method(self, node) -> FuncDecl | None:
        name = node.child_by_field_name("name")
        receiver = self._convert_receiver(node.child_by_field_name("receiver"))
        if name is None or receiver is None:
            return None
        results, grouped = self._convert_result(node.child_by_field_name("result"))
        return FuncDecl(
            name=Ident(self._text(name), _row(name)),
            params=self._convert_params(node.child_by_field_name("parameters")),
            results=results,
            results_grouped=grouped,
            receiver=receiver,
        )

    def _convert_type_decl(self, node) -> TypeDecl | None:
        specs = []
        for child in node.named_children:
            if child.type not in ("type_spec", "type_alias"):
                continue
            name = child.child_by_field_name("name")
            type_node = child.child_by_field_name("type")
            if name is None or type_node is None:
                logger.debug(f"Skipping incomplete {child.type} at line {_row(child)}")
                continue
            specs.append(TypeSpec(
                name=Ident(self._text(name), _row(name)),
                shape=self._convert_shape(type_node),
                alias=child.type == "type_alias",
            ))
        if not specs:
            return None
        return TypeDecl(specs=tuple(specs))

    def _convert_value_specs(self, node, spec_type: str) -> tuple[ValueSpec, ...]:
        specs = []
        # Grouped var blocks nest specs in a var_spec_list on newer grammars.
        for spec in self._descendants_of_type(node, spec_type):
            names = tuple(
                Ident(self._text(n), _row(n))
                for n in spec.children_by_field_name("name")
            )
            if not names:
                continue
            type_node = spec.child_by_field_name("type")
            specs.append(ValueSpec(
                names=names,
                type=_compact(self._text(type_node)) if type_node is not None else None,
            ))
        return tuple(specs)

    def _descendants_of_type(self, node, node_type: str) -> list:
        """Collect nodes of ``node_type`` without descending into matches."""
        found = []
        for child in node.named_children:
            if child.type == node_type:
                found.append(child)
            elif child.type.endswith("_list"):
                found.extend(self._descendants_of_type(child, node_type))
        return found

    # === Types ===

    def _convert_shape(self, node):
        if node.type == STRUCT_NODE:
            return self._convert_struct(node)
        if node.type == INTERFACE_NODE:
            return self._convert_interface(node)
        return OtherType(text=_compact(self._text(node)))

    def _convert_struct(self, node) -> StructType:
        fields = []
        for field_list in node.named_children:
            if field_list.type != "field_declaration_list":
                continue
            for decl in field_list.named_children:
                if decl.type != "field_declaration":
                    continue
                type_node = decl.child_by_field_name("type")
                if type_node is None:
                    continue
                names = tuple(
                    Ident(self._text(n), _row(n))
                    for n in decl.children_by_field_name("name")
                )
                type_text = _compact(self._text(type_node))
                if not names and any(c.type == "*" for c in decl.children):
                    type_text = "*" + type_text
                fields.append(FieldSpec(
                    names=names,
                    type=type_text,
                    line=names[0].line if names else _row(type_node),
                ))
        return StructType(fields=tuple(fields))

    def _convert_interface(self, node) -> InterfaceType:
        methods = []
        embeds = []
        for child in node.named_children:
            if child.type in INTERFACE_METHOD_NODES:
                name = child.child_by_field_name("name")
                if name is None:
                    continue
                results, grouped = self._convert_result(child.child_by_field_name("result"))
                methods.append(MethodSpec(
                    name=Ident(self._text(name), _row(name)),
                    params=self._convert_params(child.child_by_field_name("parameters")),
                    results=results,
                    results_grouped=grouped,
                ))
            elif child.type in INTERFACE_EMBED_NODES:
                embeds.append(_compact(self._text(child)))
        return InterfaceType(methods=tuple(methods), embeds=tuple(embeds))

    # === Parameters ===

    def _convert_params(self, node) -> tuple[Param, ...]:
        if node is None:
            return ()
        params = []
        for child in node.named_children:
            if child.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                continue
            type_node = child.child_by_field_name("type")
            if type_node is None:
                continue
            params.append(Param(
                names=tuple(self._text(n) for n in child.children_by_field_name("name")),
                type=_compact(self._text(type_node)),
                variadic=child.type == "variadic_parameter_declaration",
            ))
        return tuple(params)

    def _convert_result(self, node) -> tuple[tuple[Param, ...], bool]:
        if node is None:
            return (), False
        if node.type == "parameter_list":
            return self._convert_params(node), True
        return (Param(names=(), type=_compact(self._text(node))),), False

    def _convert_receiver(self, node) -> Receiver | None:
        if node is None:
            return None
        for child in node.named_children:
            if child.type != "parameter_declaration":
                continue
            type_node = child.child_by_field_name("type")
            pointer = False
            while type_node is not None and type_node.type in ("pointer_type", "parenthesized_type"):
                if type_node.type == "pointer_type":
                    pointer = True
                type_node = next(iter(type_node.named_children), None)
            if type_node is not None and type_node.type == "generic_type":
                type_node = type_node.child_by_field_name("type")
            if type_node is None or type_node.type != "type_identifier":
                return None
            return Receiver(type_name=self._text(type_node), pointer=pointer)
        return None


def format_tree(source_file: SourceFile) -> str:
    """Render a parsed file as an indented outline (debug output)."""
    out = []
    if source_file.package is not None:
        out.append(f"package {source_file.package.name} (line {source_file.package.line})")
    for decl in source_file.decls:
        if isinstance(decl, ImportDecl):
            out.append(f"import (line {decl.line})")
            out.extend(f"    {path}" for path in decl.paths)
        elif isinstance(decl, FuncDecl):
            recv = ""
            if decl.receiver is not None:
                star = "*" if decl.receiver.pointer else ""
                recv = f"({star}{decl.receiver.type_name}) "
            out.append(f"func {recv}{decl.name.name} (line {decl.name.line})")
        elif isinstance(decl, TypeDecl):
            for spec in decl.specs:
                shape = type(spec.shape).__name__
                out.append(f"type {spec.name.name} {shape} (line {spec.name.line})")
                if isinstance(spec.shape, StructType):
                    for f in spec.shape.fields:
                        names = ", ".join(i.name for i in f.names) or "<embedded>"
                        out.append(f"    field {names} {f.type} (line {f.line})")
                elif isinstance(spec.shape, InterfaceType):
                    for m in spec.shape.methods:
                        out.append(f"    method {m.name.name} (line {m.name.line})")
                    out.extend(f"    embed {e}" for e in spec.shape.embeds)
        elif isinstance(decl, ValueDecl):
            for spec in decl.specs:
                for ident in spec.names:
                    out.append(f"{decl.keyword} {ident.name} (line {ident.line})")
        else:
            out.append(f"<{decl.node_type}> (line {decl.line})")
    return "\n".join(out)
