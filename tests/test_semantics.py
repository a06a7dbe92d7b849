# tests/test_semantics.py
from textwrap import dedent

import pytest

from treespec.errors import SemanticErrorKind, SemanticErrors
from treespec.parser import parse
from treespec.semantics import analyze, derived_identifier
from treespec.span import Position, Span


def analyze_text(text):
    analyze(text, parse(text))


def errors_of(text):
    with pytest.raises(SemanticErrors) as ex:
        analyze_text(text)
    return ex.value.errors


def test_valid_tree_passes():
    analyze_text("Foo\n└── when a\n   └── it b")


def test_derived_identifier():
    assert derived_identifier("when st-ff called") == "whenSt_ffCalled"


def test_duplicated_sibling_conditions():
    text = dedent("""\
        Foo
        ├── when a
        │  └── it x
        └── when a
           └── it y""")
    (err,) = errors_of(text)
    assert err.kind is SemanticErrorKind.IDENTIFIER_DUPLICATED
    assert [sp.start.line for sp in err.detail["spans"]] == [2, 4]
    assert err.span == Span.splat(err.detail["spans"][0].start)
    assert err.message == "found an identifier more than once in lines: 2, 4"


def test_duplicated_top_level_actions():
    (err,) = errors_of("Foo\n├── it does a\n└── It does a")
    assert err.kind is SemanticErrorKind.IDENTIFIER_DUPLICATED


def test_same_title_under_different_parents_is_allowed():
    analyze_text(dedent("""\
        Foo
        ├── when a
        │  └── when c
        │     └── it x
        └── when b
           └── when c
              └── it y"""))


def test_empty_condition():
    (err,) = errors_of("Foo\n└── when a")
    assert err.kind is SemanticErrorKind.CONDITION_EMPTY
    assert err.span == Span(Position(4, 2, 1), Position(13, 2, 10))


def test_empty_root():
    (err,) = errors_of("Foo")
    assert err.kind is SemanticErrorKind.TREE_EMPTY
    assert err.span == Span.splat(Position(2, 1, 3))


def test_errors_are_batched():
    text = dedent("""\
        Foo
        ├── when a
        ├── when b
        │  └── it x
        └── when b
           └── it y""")
    errors = errors_of(text)
    assert [e.kind for e in errors] == [
        SemanticErrorKind.CONDITION_EMPTY,
        SemanticErrorKind.IDENTIFIER_DUPLICATED,
    ]
    assert "treespec error" in str(SemanticErrors(errors))
