"""Pytest configuration and fixtures for codesplice tests"""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path before any imports
project_root = Path(__file__).resolve().parent.parent
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from codesplice.models import BlockKind, CodeBlock, Finding  # noqa: E402
from codesplice.syntax_tree import SyntaxNode, SyntaxTree, TypeOutline  # noqa: E402

CLASS_SOURCE = """public class C {
    public void foo() {
        int x = 1;
        System.out.println(x);
    }

    public void bar() {
        return;
    }
}
"""

FOO_TEXT = """    public void foo() {
        int x = 1;
        System.out.println(x);
    }"""

BAR_TEXT = """    public void bar() {
        return;
    }"""

INVENTORY_SOURCE = """package demo;

import java.util.List;

public class Inventory extends Base implements Runnable {
    private int count, total;
    private final List<String> names = List.of("a");

    static {
        System.out.println("init");
    }

    public Inventory() {
        count = 0;
    }

    @Override
    public void run() {
        names.forEach(n -> {
            System.out.println(n);
        });
    }

    private int compute(int a, int b) {
        if (a > b) {
            return a - b;
        }
        return b - a;
    }
}
"""


def make_block(kind=BlockKind.METHOD, start=1, end=1, size=10, findings=1, text=None, file_path="C.java"):
    """Build a CodeBlock whose text is `size` characters unless `text` is given."""
    return CodeBlock(
        file_path=file_path,
        kind=kind,
        start_line=start,
        end_line=end,
        text=text if text is not None else "x" * size,
        findings=[Finding(line=start, rule_id="CyclomaticComplexity", message="too complex") for _ in range(findings)],
    )


@pytest.fixture
def class_tree() -> SyntaxTree:
    """Class C (1-10) with methods foo (2-5) and bar (7-9), matching CLASS_SOURCE."""
    foo = SyntaxNode(kind=BlockKind.METHOD, start_line=2, end_line=5, text=FOO_TEXT.strip(), name="foo")
    bar = SyntaxNode(kind=BlockKind.METHOD, start_line=7, end_line=9, text=BAR_TEXT.strip(), name="bar")
    cls = SyntaxNode(
        kind=BlockKind.TYPE,
        start_line=1,
        end_line=10,
        text=CLASS_SOURCE.rstrip("\n"),
        name="C",
        outline=TypeOutline(
            signature="public class C",
            fields=["int count"],
            methods=["public void foo()", "public void bar()"],
        ),
        children=[foo, bar],
    )
    root = SyntaxNode(kind=BlockKind.UNKNOWN, start_line=1, end_line=11, text=CLASS_SOURCE, children=[cls])
    return SyntaxTree(root=root, source=CLASS_SOURCE)


@pytest.fixture
def block_factory():
    return make_block


@pytest.fixture
def class_source() -> str:
    return CLASS_SOURCE


@pytest.fixture
def inventory_source() -> str:
    return INVENTORY_SOURCE
