"""Tests for Java source analysis."""
from pathlib import Path

import pytest

from ollama_testgen.java_source import (
    JavaClass,
    is_test_class,
    package_name,
    primary_class_name,
    primary_type,
    read_java_class,
    skip_reason,
)

ORDER_SERVICE = """\
package com.acme.orders;

import java.util.List;

/** Handles orders. */
public final class OrderService {
    private final OrderRepository repository;

    public OrderService(OrderRepository repository) {
        this.repository = repository;
    }
}

class Helper {}
"""


class TestPackageName:
    """Package declaration parsing."""

    def test_declared_package(self):
        """Reads the dotted package."""
        assert package_name(ORDER_SERVICE) == "com.acme.orders"

    def test_default_package(self):
        """No declaration means the default package."""
        assert package_name("public class A {}") == ""


class TestPrimaryClassName:
    """Top-level type detection."""

    def test_prefers_public_type(self):
        """Public type wins over package-private helpers."""
        assert primary_class_name(ORDER_SERVICE) == "OrderService"

    def test_first_type_without_public(self):
        """Falls back to the first declared type."""
        assert primary_class_name("class Helper {}\nclass Other {}") == "Helper"

    @pytest.mark.parametrize("kind", ["interface", "enum", "record", "@interface"])
    def test_other_kinds(self, kind):
        """Interfaces, enums, records and annotations are types too."""
        assert primary_class_name(f"public {kind} Shape {{}}") == "Shape"

    def test_fallback(self):
        """No type declaration returns the fallback."""
        assert primary_class_name("// empty", fallback="Empty") == "Empty"


class TestPrimaryType:
    """Kind detection for the top-level type."""

    @pytest.mark.parametrize(
        "declaration,kind",
        [
            ("public final class Shape {}", "class"),
            ("public interface Shape {}", "interface"),
            ("public enum Shape { CIRCLE }", "enum"),
            ("public record Shape(int sides) {}", "record"),
            ("public @interface Shape {}", "annotation"),
            ("abstract class Shape {}", "class"),
        ],
    )
    def test_kinds(self, declaration, kind):
        assert primary_type(declaration) == (kind, "Shape")

    def test_nested_types_ignored(self):
        """A public nested class does not beat the top-level type."""
        source = "interface Registry {\n    public static class Entry {}\n}\n"
        assert primary_type(source) == ("interface", "Registry")

    def test_annotated_declaration(self):
        source = "@Deprecated\npublic class Legacy {}"
        assert primary_type(source) == ("class", "Legacy")

    def test_no_type(self):
        assert primary_type("// nothing here") is None


class TestSkipReason:
    """Which types get a generated test."""

    def test_plain_class_qualifies(self):
        assert skip_reason(JavaClass("OrderService", "com.acme", ORDER_SERVICE)) is None

    @pytest.mark.parametrize("kind", ["interface", "enum", "record", "annotation"])
    def test_non_class_skipped(self, kind):
        reason = skip_reason(JavaClass("Shape", "", "", kind=kind))
        assert reason and kind in reason

    def test_test_class_skipped(self):
        reason = skip_reason(JavaClass("OrderServiceTest", "com.acme", ""))
        assert "already a test class" in reason


class TestIsTestClass:
    """Test class heuristics."""

    @pytest.mark.parametrize("name", ["OrderServiceTest", "TestOrderService"])
    def test_name_convention(self, name):
        """Test prefix or suffix marks a test."""
        assert is_test_class(name)

    def test_junit_import(self):
        """JUnit imports mark a test."""
        source = "import org.junit.jupiter.api.Assertions;\npublic class Checks {}"
        assert is_test_class("Checks", source)

    def test_test_directory(self):
        """Files under a test directory are tests."""
        assert is_test_class("Fixtures", "", Path("src/test/java/com/acme/Fixtures.java"))

    def test_production_class(self):
        """Plain production classes are not tests."""
        path = Path("src/main/java/com/acme/orders/OrderService.java")
        assert not is_test_class("OrderService", ORDER_SERVICE, path)


class TestReadJavaClass:
    """Reading classes from disk."""

    def test_reads_file(self, tmp_path):
        """Name, package and source come from the file."""
        path = tmp_path / "OrderService.java"
        path.write_text(ORDER_SERVICE)

        java_class = read_java_class(path)

        assert java_class.name == "OrderService"
        assert java_class.package == "com.acme.orders"
        assert java_class.source == ORDER_SERVICE
        assert java_class.qualified_name == "com.acme.orders.OrderService"

    def test_missing_file(self, tmp_path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_java_class(tmp_path / "Nope.java")

    def test_not_java(self, tmp_path):
        """Only .java files are accepted."""
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError, match="Not a Java source file"):
            read_java_class(path)

    def test_reads_kind(self, tmp_path):
        path = tmp_path / "Color.java"
        path.write_text("package com.acme;\n\npublic enum Color { RED, GREEN }\n")

        java_class = read_java_class(path)

        assert java_class.kind == "enum"
        assert java_class.name == "Color"
