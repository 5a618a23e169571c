import json

from simplelang.ast_debug import debug_ast
from simplelang.parser import parse


def test_debug_call():
    data = json.loads(debug_ast(parse("f(1)")))
    assert data == {
        "node": "Program",
        "statements": [
            {
                "node": "CallExpression",
                "name": "f",
                "arguments": [{"node": "NumberLiteralExpression", "value": 1}],
            }
        ],
    }

def test_debug_chain_operators_by_name():
    data = json.loads(debug_ast(parse("a == 2")))
    chain = data["statements"][0]
    assert chain["node"] == "BinaryChainExpression"
    assert chain["first"] == {"node": "VariableExpression", "name": "a"}
    assert chain["rest"] == [["EQUAL", {"node": "NumberLiteralExpression", "value": 2}]]

def test_debug_if_without_else():
    data = json.loads(debug_ast(parse("if (x) { }")))
    if_stmt = data["statements"][0]
    assert if_stmt["node"] == "IfStatement"
    assert if_stmt["then_block"] == {"node": "Block", "statements": []}
    assert if_stmt["else_block"] is None

def test_debug_without_spans_by_default():
    assert "span" not in debug_ast(parse("x = 1;"))

def test_debug_with_spans():
    data = json.loads(debug_ast(parse("x = 1;"), include_spans=True))
    assignment = data["statements"][0]
    assert assignment["span"].startswith("1:1-")
    assert assignment["value"]["span"].startswith("1:5-")

def test_debug_indent():
    assert debug_ast(parse("x"), indent=None) == '{"node": "Program", "statements": [{"node": "VariableExpression", "name": "x"}]}'
