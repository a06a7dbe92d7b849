# tests/test_parser.py
import pytest

from treespec.ast import Action, Condition, Description, Root
from treespec.errors import ParseError, ParseErrorKind
from treespec.parser import parse
from treespec.span import Position, Span


def p(offset, line, column):
    return Position(offset, line, column)


def s(start, end):
    return Span(start, end)


def parse_error(text):
    with pytest.raises(ParseError) as ex:
        parse(text)
    return ex.value


ONE_CHILD = "Foo_Test\n└── when something bad happens\n   └── it should revert"


def test_only_contract_name():
    assert parse("FooTest") == Root(contract_name="FooTest", children=[], span=s(p(0, 1, 1), p(6, 1, 7)))


def test_one_child():
    assert parse(ONE_CHILD) == Root(
        contract_name="Foo_Test",
        span=s(p(0, 1, 1), p(62, 3, 23)),
        children=[
            Condition(
                title="when something bad happens",
                span=s(p(9, 2, 1), p(62, 3, 23)),
                children=[Action(title="it should revert", span=s(p(43, 3, 4), p(62, 3, 23)))],
            )
        ],
    )


def test_action_description_keeps_column_delta():
    root = parse(ONE_CHILD + "\n      └── because _bad_")
    action = root.children[0].children[0]
    assert action.children == [
        Description(text="   because _bad_", span=s(p(70, 4, 7), p(86, 4, 23)))
    ]
    assert root.span.end == p(86, 4, 23)


def test_nested_action_descriptions_are_flattened():
    text = "\n".join([
        "Foo_Test",
        "└── when something bad happens",
        "   └── it should revert",
        "      ├── some stuff happened",
        "      │  └── and that stuff",
        "      └── was very _bad_",
    ])
    action = parse(text).children[0].children[0]
    assert [d.text for d in action.children] == [
        "   some stuff happened",
        "      and that stuff",
        "   was very _bad_",
    ]


def test_two_children():
    text = "\n".join([
        "FooBarTheBest_Test",
        "├── when stuff called",
        "│  └── it should revert",
        "└── given not stuff called",
        "   └── it should revert",
    ])
    root = parse(text)
    assert [c.title for c in root.children] == ["when stuff called", "given not stuff called"]
    assert all(isinstance(c.children[0], Action) for c in root.children)


def test_top_level_actions():
    root = parse("Foo\n└── It reverts when X.")
    assert root.children == [Action(title="It reverts when X.", span=s(p(4, 2, 1), p(25, 2, 22)))]


def test_condition_titles_are_sanitized():
    root = parse('FooB-rTheBestOf_Test\n└── when st-ff "all\'d\n   └── it should revert')
    assert root.contract_name == "FooB-rTheBestOf_Test"
    assert root.children[0].title == "when st_ff alld"


def test_empty_tree():
    err = parse_error("")
    assert err.kind is ParseErrorKind.TREE_EMPTY
    assert err.span == Span()


@pytest.mark.parametrize("text", [
    "└── It should never revert.",
    "├── It should revert.",
    "└── When stuff happens",
    "└── this is a description",
])
def test_rootless_tree(text):
    err = parse_error(text)
    assert err.kind is ParseErrorKind.TREE_ROOTLESS
    assert err.span == Span.splat(p(0, 1, 1))


def test_tee_last_child():
    err = parse_error("Foo_Test\n├── when something bad happens\n   └── it should revert")
    assert err.kind is ParseErrorKind.TEE_LAST_CHILD
    assert err.span == Span.splat(p(9, 2, 1))


def test_tee_last_child_before_missing_title():
    err = parse_error("a\n├ when")
    assert err.kind is ParseErrorKind.TEE_LAST_CHILD
    assert err.span == Span.splat(p(2, 2, 1))


def test_corner_not_last_child():
    text = "\n".join([
        "Foo_Test",
        "└── when something bad happens",
        "   └── it should revert",
        "└── when something happens",
        "   └── it should not revert",
    ])
    err = parse_error(text)
    assert err.kind is ParseErrorKind.CORNER_NOT_LAST_CHILD
    assert err.span == Span.splat(p(9, 2, 1))


def test_sibling_rules_apply_to_nested_branches():
    text = "\n".join([
        "Foo",
        "└── when a",
        "   ├── it x",
        "   └── when b",
        "      ├── it y",
    ])
    err = parse_error(text)
    assert err.kind is ParseErrorKind.TEE_LAST_CHILD
    assert err.span.start.line == 5


@pytest.mark.parametrize("text,kind,span,detail", [
    ("a └ └", ParseErrorKind.TOKEN_UNEXPECTED, Span.splat(p(4, 1, 5)), {"lexeme": "└"}),
    ("a ├ ├", ParseErrorKind.TOKEN_UNEXPECTED, Span.splat(p(4, 1, 5)), {"lexeme": "├"}),
    ("a └", ParseErrorKind.EOF_UNEXPECTED, Span.splat(p(2, 1, 3)), {}),
    ("a ├", ParseErrorKind.EOF_UNEXPECTED, Span.splat(p(2, 1, 3)), {}),
    ("a └ when", ParseErrorKind.TITLE_MISSING, s(p(4, 1, 5), p(7, 1, 8)), {}),
    ("a when", ParseErrorKind.WHEN_UNEXPECTED, s(p(2, 1, 3), p(5, 1, 6)), {}),
    ("a given", ParseErrorKind.GIVEN_UNEXPECTED, s(p(2, 1, 3), p(6, 1, 7)), {}),
    ("a it", ParseErrorKind.IT_UNEXPECTED, s(p(2, 1, 3), p(3, 1, 4)), {}),
    ("a b", ParseErrorKind.WORD_UNEXPECTED, Span.splat(p(2, 1, 3)), {"lexeme": "b"}),
])
def test_unexpected_tokens(text, kind, span, detail):
    err = parse_error(text)
    assert err.kind is kind
    assert err.span == span
    assert err.detail == detail


def test_descriptions_are_the_only_action_children():
    err = parse_error(ONE_CHILD + "\n      └── it because _bad_")
    assert err.kind is ParseErrorKind.DESCRIPTION_TOKEN_UNEXPECTED
    assert err.detail == {"lexeme": "it"}
    assert err.span == s(p(74, 4, 11), p(75, 4, 12))
