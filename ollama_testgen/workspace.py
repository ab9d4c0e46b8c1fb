"""
Test workspace handling.
Resolves where a generated test belongs and writes it without clobbering
existing tests.
"""

from pathlib import Path

from .java_source import PACKAGE_RE, JavaClass, read_java_class, skip_reason
from .logger import get_logger

logger = get_logger(__name__)


def find_source_root(source_file: Path) -> Path | None:
    """Find the source root containing ``source_file``.

    Prefers a Maven/Gradle ``src/<set>/java`` root, then a plain ``src``
    directory.
    """
    source_file = Path(source_file).resolve()
    for parent in source_file.parents:
        if parent.name == "java" and parent.parent.parent.name == "src":
            return parent
    for parent in source_file.parents:
        if parent.name == "src":
            return parent
    return None


def find_test_directory(source_file: Path) -> Path:
    """
    Determine the test source root for a class.

    ``src/main/java`` maps to ``src/test/java``; a plain ``src`` root maps
    to a sibling ``test`` directory when one exists. Sources that already
    live under a test root, or that have no recognisable root, keep their
    own root (or directory).

    Args:
        source_file: Path to the class's source file

    Returns:
        Directory under which package directories are created
    """
    source_root = find_source_root(source_file)
    if source_root is None:
        return Path(source_file).resolve().parent

    if source_root.name == "java":
        if source_root.parent.name == "test":
            return source_root
        return source_root.parent.parent / "test" / "java"

    sibling = source_root.parent / "test"
    if sibling.is_dir():
        return sibling
    return source_root


def render_test_file(package: str, test_code: str) -> str:
    """Prepend a package declaration unless the code already carries one."""
    if package and not PACKAGE_RE.search(test_code):
        return f"package {package};\n\n{test_code}"
    return test_code


def expected_test_path(test_root: Path, package: str, test_class_name: str) -> Path:
    """Return ``{test_root}/{package dirs}/{test_class_name}.java``."""
    directory = Path(test_root)
    for part in package.split("."):
        if part:
            directory = directory / part
    return directory / f"{test_class_name}.java"


def has_test_class(java_class: JavaClass, test_root: Path | None = None) -> bool:
    """
    Check whether ``{Name}Test.java`` exists in the class's package.

    Args:
        java_class: Class to look up
        test_root: Test source root (default: derived from the class's path)
    """
    if test_root is None:
        test_root = find_test_directory(java_class.path)
    path = expected_test_path(test_root, java_class.package, f"{java_class.name}Test")
    return path.is_file()


def find_untested_classes(
    source_root: Path,
    test_root: Path | None = None,
) -> list[JavaClass]:
    """
    Walk ``source_root`` for classes that have no test yet.

    Each ``.java`` file contributes its primary top-level type only, so
    nested and anonymous classes are never reported. Interfaces, enums,
    records, annotation types and test classes are skipped.

    Args:
        source_root: Directory to scan
        test_root: Test source root (default: derived per file)

    Returns:
        Untested classes, ordered by path

    Raises:
        NotADirectoryError: If ``source_root`` is not a directory
    """
    source_root = Path(source_root)
    if not source_root.is_dir():
        raise NotADirectoryError(f"Not a directory: {source_root}")

    untested = []
    for path in sorted(source_root.rglob("*.java")):
        try:
            java_class = read_java_class(path)
        except (OSError, ValueError) as e:
            logger.warning("workspace.scan.unreadable", path=str(path), error_message=str(e))
            continue

        reason = skip_reason(java_class)
        if reason:
            logger.debug("workspace.scan.skipped", path=str(path), reason=reason)
            continue
        if has_test_class(java_class, test_root):
            continue
        untested.append(java_class)

    logger.info(
        "workspace.scan",
        event="workspace.scan",
        source_root=str(source_root),
        untested=len(untested),
    )
    return untested


def safe_write_test_file(
    test_root: Path,
    package: str,
    test_class_name: str,
    test_code: str,
    force: bool = False,
) -> tuple[Path, bool]:
    """
    Write ``{test_class_name}.java`` under the package directories of ``test_root``.

    Args:
        test_root: Test source root
        package: Dotted package name ("" for the default package)
        test_class_name: Simple name of the test class
        test_code: Generated test source
        force: Overwrite an existing file

    Returns:
        Tuple of (path, written). ``written`` is False when an existing file
        was left untouched.

    Raises:
        ValueError: If the test class name is empty or not an identifier
    """
    if not test_class_name or not test_class_name.isidentifier():
        raise ValueError(f"Invalid test class name: '{test_class_name}'")

    full_path = expected_test_path(test_root, package, test_class_name)
    directory = full_path.parent

    if full_path.exists() and not force:
        logger.warning(
            "workspace.exists",
            event="workspace.write.skipped",
            path=str(full_path),
        )
        return full_path, False

    directory.mkdir(parents=True, exist_ok=True)
    full_path.write_text(render_test_file(package, test_code), encoding="utf-8")

    logger.info(
        "workspace.write",
        event="workspace.write",
        path=str(full_path),
        package=package,
    )
    return full_path, True
