"""Type resolution from declared types and doc comment annotations."""

import re

from skelgen.generator.scanner import EMPTY_IMPORTS, ImportTable, SourceScanner
from skelgen.generator.types import (
    MIXED,
    SELF_REFERENCES,
    Named,
    Primitive,
    PrimitiveKind,
    ResolvedType,
    SelfReferential,
    array_of,
    primitive_kind,
)
from skelgen.lib.config import GeneratorConfig
from skelgen.lib.errors import ReturnTypeNotFoundError
from skelgen.lib.logging import get_logger
from skelgen.reflection.models import (
    ReflectedMethod,
    ReflectedParameter,
    namespace_of,
)
from skelgen.reflection.registry import ClassRegistry

logger = get_logger(__name__)

_RETURN_TAG = re.compile(r"@return\s+(.+?)\s*(?:\*/)?$", re.MULTILINE)
_PARAM_TAG = re.compile(r"@param\s+(.+?)\s*(?:\*/)?$", re.MULTILINE)
_SUMMARY_LINE = re.compile(r"^[ \t]*/?\*+[ \t]?(.*?)[ \t]*$", re.MULTILINE)
_GENERICS = re.compile(r"<[^<>]*>")
_INHERITDOC = re.compile(r"\{?@inheritdoc\}?", re.IGNORECASE)


def strip_generics(text: str) -> str:
    """Drop generic arguments, e.g. ``Collection<int, Foo>`` becomes ``Collection``."""
    previous = None
    while previous != text:
        previous = text
        text = _GENERICS.sub("", text)
    return text


def pick_union_branch(text: str) -> str | None:
    """First ``|`` alternative that is not null, None when only null is left."""
    branches = [branch.strip() for branch in text.split("|") if branch.strip()]
    for branch in branches:
        if branch.lower() not in ("null", "?null"):
            return branch
    return branches[0] if branches else None


def clean_type_text(text: str | None) -> str | None:
    """Normalize raw type text: generics, union, leading '?' and whitespace tail."""
    if not text:
        return None
    text = strip_generics(text.strip())
    branch = pick_union_branch(text)
    if branch is None:
        return None
    branch = branch.split()[0] if branch.split() else branch
    if branch.startswith("?"):
        branch = branch[1:]
    branch = branch.strip("()")
    return branch or None


def parse_return_annotation(doc_comment: str | None) -> str | None:
    """Type text of the first ``@return`` tag."""
    if not doc_comment:
        return None
    match = _RETURN_TAG.search(doc_comment)
    if match is None:
        return None
    return clean_type_text(match.group(1))


def parse_param_annotations(doc_comment: str | None) -> list[tuple[str | None, str | None]]:
    """
    All ``@param`` tags of a doc comment.

    Returns:
        List of (type text, parameter name without '$') in tag order
    """
    if not doc_comment:
        return []
    tags: list[tuple[str | None, str | None]] = []
    for raw in _PARAM_TAG.findall(doc_comment):
        parts = strip_generics(raw).split()
        type_text: str | None = None
        name: str | None = None
        for part in parts:
            if part.startswith("$") or part.startswith("...$") or part.startswith("&$"):
                name = part.lstrip(".&$").rstrip(",")
                break
            if type_text is None:
                type_text = part
        tags.append((clean_type_text(type_text), name))
    return tags


def summary_line(doc_comment: str | None) -> str | None:
    """First descriptive line of a doc comment, trailing dots trimmed."""
    if not doc_comment:
        return None
    for line in _SUMMARY_LINE.findall(doc_comment):
        line = line.strip()
        if line.endswith("*/"):
            line = line[:-2].rstrip()
        if not line or line.startswith("@") or line == "/":
            continue
        if _INHERITDOC.fullmatch(line):
            continue
        line = line.strip(". \t")
        if line:
            return line
    return None


class TypeResolver:
    """Resolve method return types and parameter types.

    The declared type wins unless it is missing or the generic ``array``.
    Doc comment tags fill the gaps, with names qualified through the
    declaring file's import table.
    """

    def __init__(
        self,
        registry: ClassRegistry,
        scanner: SourceScanner,
        config: GeneratorConfig,
    ) -> None:
        self.registry = registry
        self.scanner = scanner
        self.config = config

    @property
    def strict(self) -> bool:
        return self.config.strict_types

    # ------------------------------------------------------------------
    # Import tables and name qualification
    # ------------------------------------------------------------------

    def imports_for(self, class_name: str, include_ancestors: bool = False) -> ImportTable:
        """Import table of the file declaring ``class_name``."""
        cls = self.registry.find(class_name)
        if cls is None or cls.is_internal:
            return EMPTY_IMPORTS
        table = self.scanner.imports(cls.file_name)
        if not include_ancestors:
            return table
        parents, traits = self.registry.parent_classes_and_traits(cls.name)
        others = [self.imports_for(name) for name in [*parents, *traits]]
        return table.merged(*others)

    def qualify(self, name: str, declaring_class: str, imports: ImportTable | None = None) -> str:
        """
        Turn an annotation name into a fully qualified class name.

        Order: explicit leading backslash, a name already known to the
        registry, an alias of the import table (first segment of a partial
        name), an imported class with the same short name, then the
        namespace of the declaring class.
        """
        name = name.strip()
        if name.startswith("\\"):
            return name.lstrip("\\")

        known = self.registry.find(name)
        if known is not None and "\\" in name:
            return known.name

        if imports is None:
            imports = self.imports_for(declaring_class)

        first, _, rest = name.partition("\\")
        if first in imports:
            full_name = imports[first] + ("\\" + rest if rest else "")
            known = self.registry.find(full_name)
            return known.name if known else full_name

        for candidate in imports.find_by_short_name(name):
            known = self.registry.find(candidate)
            if known is not None:
                return known.name

        namespace = namespace_of(declaring_class)
        full_name = f"{namespace}\\{name}" if namespace else name
        known = self.registry.find(full_name)
        if known is not None:
            return known.name
        if self.registry.find(name) is not None:
            return self.registry.get(name).name
        return full_name

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(
        self,
        text: str,
        declaring_class: str,
        from_annotation: bool = True,
        imports: ImportTable | None = None,
    ) -> ResolvedType:
        """
        Classify cleaned type text.

        Declared types are already fully qualified by PHP, annotation names
        are qualified through the import table.
        """
        text = text.strip()
        if text.endswith("[]"):
            inner = text[:-2]
            kind = primitive_kind(text)
            if kind is not None:
                return Primitive(kind)
            return array_of(self.classify(inner, declaring_class, from_annotation, imports))

        kind = primitive_kind(text)
        if kind is not None:
            return Primitive(kind)
        if text.lower() in SELF_REFERENCES:
            return SelfReferential(declaring_class)
        if from_annotation:
            return Named(self.qualify(text, declaring_class, imports))
        known = self.registry.find(text)
        return Named(known.name if known else text)

    def _declaring_class(self, method: ReflectedMethod) -> str:
        return method.declaring_class.lstrip("\\")

    def _inherited_doc(self, method: ReflectedMethod) -> str | None:
        """Doc comment of the prototype or the nearest parent declaring the method."""
        candidates: list[str] = []
        if method.prototype:
            candidates.append(method.prototype)
        declaring = self.registry.find(method.declaring_class)
        if declaring is not None:
            candidates.extend(parent.name for parent in self.registry.parent_chain(declaring.name))
            candidates.extend(declaring.interfaces)
        for candidate in candidates:
            other = self.registry.method(candidate, method.name)
            if other is None or other.doc_comment is None:
                continue
            if _INHERITDOC.search(other.doc_comment) and other.declaring_class == method.declaring_class:
                continue
            return other.doc_comment
        return None

    def doc_comment(self, method: ReflectedMethod) -> str | None:
        """Effective doc comment, following ``@inheritdoc`` once."""
        doc = method.doc_comment
        if doc and _INHERITDOC.search(doc) and "@return" not in doc:
            return self._inherited_doc(method) or doc
        if not doc:
            return self._inherited_doc(method) if method.prototype else None
        return doc

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    def resolve_return_type(self, method: ReflectedMethod) -> ResolvedType:
        """
        Resolve the return type of a method.

        Raises:
            ReturnTypeNotFoundError: In strict mode when nothing is declared
                or annotated
        """
        declaring = self._declaring_class(method)
        if method.name in self.config.rules.self_returning_methods:
            return SelfReferential(declaring)

        declared = clean_type_text(method.return_type)
        if declared is not None and declared.lower() != "array":
            return self.classify(declared, declaring, from_annotation=False)

        annotated = parse_return_annotation(self.doc_comment(method))
        if annotated is not None:
            resolved = self.classify(annotated, declaring)
            if declared is None or not isinstance(resolved, Primitive) or resolved.kind is PrimitiveKind.ARRAY:
                return resolved
            return Primitive(PrimitiveKind.ARRAY)

        if declared is not None:
            return Primitive(PrimitiveKind.ARRAY)

        if method.is_constructor or method.is_destructor:
            return Primitive(PrimitiveKind.VOID)
        if self.strict:
            raise ReturnTypeNotFoundError(declaring, method.name)
        logger.debug("return_type_defaulted", class_name=declaring, method=method.name)
        return MIXED

    def resolve_param_type(self, method: ReflectedMethod, parameter: ReflectedParameter) -> ResolvedType:
        """
        Resolve the type of one parameter.

        The ``@param`` tag is matched by the ``$name`` echo when present and
        by position otherwise.

        Raises:
            ReturnTypeNotFoundError: In strict mode when nothing is declared
                or annotated
        """
        declaring = self._declaring_class(method)
        declared = clean_type_text(parameter.type)
        if declared is not None and declared.lower() != "array":
            return self.classify(declared, declaring, from_annotation=False)

        annotated = self._param_annotation(method, parameter)
        if annotated is None:
            annotated = self._prototype_param_annotation(method, parameter)
        if annotated is not None:
            resolved = self.classify(annotated, declaring)
            if declared is None or not isinstance(resolved, Primitive) or resolved.kind is PrimitiveKind.ARRAY:
                return resolved
            return Primitive(PrimitiveKind.ARRAY)

        if declared is not None:
            return Primitive(PrimitiveKind.ARRAY)
        if self.strict:
            raise ReturnTypeNotFoundError(declaring, method.name, parameter.name)
        logger.debug(
            "param_type_defaulted",
            class_name=declaring,
            method=method.name,
            parameter=parameter.name,
        )
        return MIXED

    def _param_annotation(self, method: ReflectedMethod, parameter: ReflectedParameter) -> str | None:
        tags = parse_param_annotations(self.doc_comment(method))
        for type_text, name in tags:
            if name is not None and name == parameter.name:
                return type_text
        if parameter.position < len(tags) and tags[parameter.position][1] is None:
            return tags[parameter.position][0]
        return None

    def _prototype_param_annotation(self, method: ReflectedMethod, parameter: ReflectedParameter) -> str | None:
        declaring = self.registry.find(method.declaring_class)
        if declaring is None:
            return None
        candidates = [*declaring.interfaces, *(parent.name for parent in self.registry.parent_chain(declaring.name))]
        for candidate in candidates:
            other = self.registry.method(candidate, method.name)
            if other is None or other.declaring_class == method.declaring_class:
                continue
            for other_param in other.parameters:
                if other_param.position != parameter.position:
                    continue
                declared = clean_type_text(other_param.type)
                if declared is not None:
                    return "\\" + declared if self.registry.exists(declared) else declared
                annotated = self._param_annotation(other, other_param)
                if annotated is not None:
                    return annotated
        return None


def method_comment(resolver: TypeResolver, method: ReflectedMethod) -> str:
    """Human readable summary of a method for generated doc blocks."""
    return summary_line(resolver.doc_comment(method)) or f"Execute '{method.name}' method"


__all__ = [
    "TypeResolver",
    "clean_type_text",
    "method_comment",
    "parse_param_annotations",
    "parse_return_annotation",
    "pick_union_branch",
    "strip_generics",
    "summary_line",
]
