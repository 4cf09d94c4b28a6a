"""Tests for the tree-sitter backed Java syntax adapter."""

import pytest

from codesplice.exceptions import SourceParseError
from codesplice.models import BlockKind
from codesplice.syntax_tree import parse_java


class TestParseJava:
    """Tests for mapping tree-sitter Java nodes onto block kinds."""

    def test_root_spans_whole_file(self, inventory_source):
        """Verify the root is an Unknown node covering every line."""
        tree = parse_java(inventory_source)

        assert tree.root.kind == BlockKind.UNKNOWN
        assert tree.root.start_line == 1
        assert tree.source == inventory_source

    def test_type_declaration_lines_and_name(self, inventory_source):
        """Verify the class is found with 1-based inclusive lines."""
        types = parse_java(inventory_source).type_declarations()

        assert len(types) == 1
        cls = types[0]
        assert cls.name == "Inventory"
        assert (cls.start_line, cls.end_line) == (5, 30)

    def test_members_attach_to_class_in_document_order(self, inventory_source):
        """Verify initializer, constructor and methods become children of the class."""
        cls = parse_java(inventory_source).type_declarations()[0]

        summary = [(child.kind, child.start_line, child.end_line) for child in cls.children]
        assert summary == [
            (BlockKind.STATIC_INITIALIZER, 9, 11),
            (BlockKind.METHOD, 13, 15),
            (BlockKind.METHOD, 17, 22),
            (BlockKind.METHOD, 24, 29),
        ]

    def test_lambda_nests_under_enclosing_method(self, inventory_source):
        """Verify lambdas hang off the method they appear in."""
        cls = parse_java(inventory_source).type_declarations()[0]
        run = cls.children[2]

        assert run.name == "run"
        assert [(c.kind, c.start_line, c.end_line) for c in run.children] == [(BlockKind.LAMBDA, 19, 21)]

    def test_method_text_is_verbatim_source(self, inventory_source):
        """Verify method text is sliced from the source, not pretty-printed."""
        cls = parse_java(inventory_source).type_declarations()[0]
        compute = cls.children[3]

        assert compute.text.startswith("private int compute(int a, int b) {")
        assert compute.text.endswith("return b - a;\n    }")
        assert compute.text in inventory_source

    def test_type_outline(self, inventory_source):
        """Verify the outline keeps signature, fields and member signatures."""
        outline = parse_java(inventory_source).type_declarations()[0].outline

        assert outline.signature == "public class Inventory extends Base implements Runnable"
        assert outline.fields == ["int count, total", "List<String> names"]
        assert outline.methods == [
            "public Inventory()",
            "@Override public void run()",
            "private int compute(int a, int b)",
        ]

    def test_nested_types_are_discovered_in_order(self):
        """Verify inner types are listed after their outer type."""
        source = "class Outer {\n    static class Inner {\n        void m() {}\n    }\n    interface Api {}\n}\n"
        types = parse_java(source).type_declarations()

        assert [t.name for t in types] == ["Outer", "Inner", "Api"]
        assert (types[1].start_line, types[1].end_line) == (2, 4)

    def test_instance_initializer_is_an_initializer_block(self):
        source = "class A {\n    {\n        x = 1;\n    }\n    int x;\n}\n"
        cls = parse_java(source).type_declarations()[0]

        assert [(c.kind, c.start_line, c.end_line) for c in cls.children] == [
            (BlockKind.STATIC_INITIALIZER, 2, 4)
        ]

    def test_syntax_errors_raise_parse_error(self):
        """Verify an unparsable file is reported, not half-parsed."""
        with pytest.raises(SourceParseError) as exc_info:
            parse_java("public class Broken {\n    void m( {\n}\n}}}", file_path="Broken.java")

        assert exc_info.value.file_path == "Broken.java"
        assert "Broken.java" in str(exc_info.value)
