"""
Java source analysis - type name and kind, package and test detection.

Works on source text with regular expressions; there is no Java parser
here, so the answers are heuristics good enough to name and place a test.
"""

import re
from dataclasses import dataclass
from pathlib import Path

PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
TYPE_RE = re.compile(
    r"^\s*((?:(?:public|protected|private|abstract|final|static|sealed|non-sealed|strictfp)\s+)*)"
    r"(class|interface|enum|record|@interface)\s+(\w+)",
    re.MULTILINE,
)
JUNIT_MARKERS = ("org.junit.jupiter.api", "org.junit.Test", "@Test")

# Declaration keyword -> kind
TYPE_KINDS = {
    "class": "class",
    "interface": "interface",
    "enum": "enum",
    "record": "record",
    "@interface": "annotation",
}


@dataclass
class JavaClass:
    """A class read from a source file."""

    name: str
    package: str
    source: str
    path: Path | None = None
    kind: str = "class"

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


def package_name(source: str) -> str:
    """Return the declared package, or "" for the default package."""
    match = PACKAGE_RE.search(source)
    return match.group(1) if match else ""


def _top_level_declarations(source: str):
    """Yield type declarations that sit outside every brace block."""
    depth = 0
    pos = 0
    for match in TYPE_RE.finditer(source):
        depth += source.count("{", pos, match.start()) - source.count("}", pos, match.start())
        pos = match.start()
        if depth <= 0:
            yield match


def primary_type(source: str) -> tuple[str, str] | None:
    """
    Find the primary top-level type of a compilation unit.

    The public top-level type wins; otherwise the first top-level type.
    Nested types never count.

    Returns:
        Tuple of (kind, name), or None when no type is declared. ``kind``
        is one of class, interface, enum, record or annotation.
    """
    declarations = list(_top_level_declarations(source))
    if not declarations:
        return None

    chosen = declarations[0]
    for match in declarations:
        if "public" in match.group(1).split():
            chosen = match
            break
    return TYPE_KINDS[chosen.group(2)], chosen.group(3)


def primary_class_name(source: str, fallback: str = "") -> str:
    """Return the public top-level type name, else the first type, else ``fallback``."""
    found = primary_type(source)
    return found[1] if found else fallback


def is_test_class(class_name: str, source: str = "", path: Path | None = None) -> bool:
    """
    Guess whether a class is already a test.

    Checks, in order: a Test prefix/suffix on the name, JUnit imports or
    annotations in the source, and a ``test`` directory in the path.
    """
    if class_name.endswith("Test") or class_name.startswith("Test"):
        return True

    if any(marker in source for marker in JUNIT_MARKERS):
        return True

    if path is not None and "test" in Path(path).parts:
        return True

    return False


def read_java_class(path: str | Path) -> JavaClass:
    """
    Read a Java source file.

    Args:
        path: Path to a ``.java`` file

    Returns:
        JavaClass with the primary type name and kind (file stem and
        "class" when none is found)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a .java file
    """
    path = Path(path)
    if path.suffix != ".java":
        raise ValueError(f"Not a Java source file: {path}")
    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")

    source = path.read_text(encoding="utf-8")
    kind, name = primary_type(source) or ("class", path.stem)
    return JavaClass(
        name=name,
        package=package_name(source),
        source=source,
        path=path,
        kind=kind,
    )


def skip_reason(java_class: JavaClass) -> str | None:
    """
    Say why a type gets no generated test, or None when it should get one.

    Only concrete top-level classes qualify. Interfaces, enums, records
    and annotation types are skipped, and so are tests themselves.
    """
    if java_class.kind != "class":
        return f"{java_class.name} is not a class (kind: {java_class.kind})."
    if is_test_class(java_class.name, java_class.source, java_class.path):
        return f"{java_class.name} is already a test class."
    return None
