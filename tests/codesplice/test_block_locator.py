"""Tests for finding the minimal enclosing block of a line."""

from codesplice.block_locator import locate
from codesplice.models import BlockKind
from codesplice.syntax_tree import SyntaxNode, SyntaxTree, parse_java


def _tree(*children, end=100):
    return SyntaxTree(root=SyntaxNode(kind=BlockKind.UNKNOWN, start_line=1, end_line=end, children=list(children)))


class TestLocate:
    """Tests for locate()."""

    def test_returns_method_inside_class(self, class_tree):
        """Verify the method wins over its enclosing class."""
        node = locate(class_tree, 3)
        assert node.kind == BlockKind.METHOD
        assert node.name == "foo"

    def test_returns_class_for_lines_between_members(self, class_tree):
        """Verify a line outside every method maps to the class."""
        node = locate(class_tree, 6)
        assert node.kind == BlockKind.TYPE
        assert node.name == "C"

    def test_boundaries_are_inclusive(self, class_tree):
        assert locate(class_tree, 2).name == "foo"
        assert locate(class_tree, 5).name == "foo"
        assert locate(class_tree, 7).name == "bar"

    def test_no_candidate_returns_none(self, class_tree):
        """Verify the Unknown root is never returned."""
        assert locate(class_tree, 11) is None

    def test_strictly_smaller_span_wins_across_kinds(self):
        """Verify a lambda inside a method beats the method."""
        lam = SyntaxNode(kind=BlockKind.LAMBDA, start_line=4, end_line=6)
        method = SyntaxNode(kind=BlockKind.METHOD, start_line=2, end_line=9, children=[lam])
        cls = SyntaxNode(kind=BlockKind.TYPE, start_line=1, end_line=10, children=[method])

        assert locate(_tree(cls), 5) is lam

    def test_equal_span_tie_prefers_method_over_lambda(self):
        lam = SyntaxNode(kind=BlockKind.LAMBDA, start_line=3, end_line=3)
        method = SyntaxNode(kind=BlockKind.METHOD, start_line=3, end_line=3)
        cls = SyntaxNode(kind=BlockKind.TYPE, start_line=1, end_line=10, children=[lam, method])

        assert locate(_tree(cls), 3) is method

    def test_equal_span_tie_prefers_initializer_over_type(self):
        init = SyntaxNode(kind=BlockKind.STATIC_INITIALIZER, start_line=1, end_line=5)
        cls = SyntaxNode(kind=BlockKind.TYPE, start_line=1, end_line=5, children=[init])

        assert locate(_tree(cls), 2) is init

    def test_equal_span_same_kind_keeps_first_visited(self):
        first = SyntaxNode(kind=BlockKind.METHOD, start_line=3, end_line=4, name="first")
        second = SyntaxNode(kind=BlockKind.METHOD, start_line=3, end_line=4, name="second")
        cls = SyntaxNode(kind=BlockKind.TYPE, start_line=1, end_line=10, children=[first, second])

        assert locate(_tree(cls), 3).name == "first"

    def test_locate_on_parsed_source(self, inventory_source):
        """Verify lookups against a real tree-sitter parse."""
        tree = parse_java(inventory_source)

        assert locate(tree, 1) is None
        assert locate(tree, 6).kind == BlockKind.TYPE
        assert locate(tree, 10).kind == BlockKind.STATIC_INITIALIZER
        assert locate(tree, 18).name == "run"
        assert locate(tree, 20).kind == BlockKind.LAMBDA
        assert locate(tree, 26).name == "compute"
