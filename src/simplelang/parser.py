from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput
from lark.lexer import PatternStr, Token
from lark.tree import Tree

from simplelang.ast_nodes import (
    ASTProgram, ASTBlock, ASTStatement, ASTExpression, ASTAssignmentStatement, ASTWhileStatement,
    ASTIfStatement, ASTFunctionDefinition, ASTNumberLiteralExpression, ASTVariableExpression,
    ASTCallExpression, ASTListLiteralExpression, ASTBinaryChainExpression, ASTBinaryOperator
)
from simplelang.config import (
    DEFAULT_FILE_ENCODING, DEFAULT_SOURCE_NAME, END_OF_INPUT, GRAMMAR_AMBIGUITY, GRAMMAR_FILE, GRAMMAR_LEXER,
    GRAMMAR_PARSER, GRAMMAR_START_RULE, TERMINAL_DESCRIPTIONS
)
from simplelang.errors import ParseError
from simplelang.source_span import SourceSpan, line_and_column

logger = logging.getLogger(__name__)


class Parser:
    def __init__(self, source_name: str = DEFAULT_SOURCE_NAME) -> None:
        grammar_path = Path(__file__).parent / GRAMMAR_FILE
        if not grammar_path.exists():
            raise FileNotFoundError(f"Grammar file '{GRAMMAR_FILE}' not found at {grammar_path.resolve()}.")

        grammar = grammar_path.read_text(encoding=DEFAULT_FILE_ENCODING)
        self.source_name = source_name
        self.parser = Lark(
            grammar,
            parser=GRAMMAR_PARSER,
            lexer=GRAMMAR_LEXER,
            ambiguity=GRAMMAR_AMBIGUITY,
            start=GRAMMAR_START_RULE,
            propagate_positions=True,
            maybe_placeholders=True,
        )
        self._ignored_terminals = frozenset(self.parser.ignore_tokens)
        logger.debug("Loaded grammar from %s", grammar_path)

    def parse(self, code: str, source_name: str | None = None) -> ASTProgram:
        """
        Parse a whole program.

        Raises ParseError at the first position where the input cannot be
        continued; no partial tree is returned.
        """
        name = source_name or self.source_name
        logger.debug("Parsing %s (%d characters)", name, len(code))
        try:
            tree = self.parser.parse(code)
            program = self._convert_program(tree)
        except UnexpectedInput as e:
            error = self._convert_error(e, code, name)
            logger.debug("Parse of %s failed: %s", name, error)
            raise error from e
        except RecursionError as e:
            error = self._nesting_error(code, name)
            logger.debug("Parse of %s failed: %s", name, error)
            raise error from e
        logger.debug("Parsed %s: %d top-level statements", name, len(program.statements))
        return program

    # --- Errors ---

    def _convert_error(self, error: UnexpectedInput, code: str, source_name: str) -> ParseError:
        if isinstance(error, UnexpectedCharacters):
            offset = error.pos_in_stream
            found = f"'{code[offset]}'" if offset < len(code) else END_OF_INPUT
            names = error.allowed or set()
        elif isinstance(error, UnexpectedEOF):
            offset = len(code)
            found = END_OF_INPUT
            names = set(error.expected)
        else:
            raise TypeError(f"Unhandled Lark error type: {type(error).__name__}")

        expected = {self._describe_terminal(name) for name in names if name not in self._ignored_terminals}
        message = f"unexpected {found}"
        if expected:
            message += f"; expected {', '.join(sorted(expected))}"

        line, column = line_and_column(code, offset)
        return ParseError(
            message,
            offset=offset,
            line=line,
            column=column,
            expected=expected,
            found=found,
            source_name=source_name,
        )

    @staticmethod
    def _nesting_error(code: str, source_name: str) -> ParseError:
        offset = _deepest_opening(code)
        line, column = line_and_column(code, offset)
        return ParseError(
            "nesting too deep",
            offset=offset,
            line=line,
            column=column,
            found=f"'{code[offset]}'" if offset < len(code) else END_OF_INPUT,
            source_name=source_name,
        )

    def _describe_terminal(self, name: str) -> str:
        if name in TERMINAL_DESCRIPTIONS:
            return TERMINAL_DESCRIPTIONS[name]
        try:
            terminal = self.parser.get_terminal(name)
        except KeyError:
            return name
        if isinstance(terminal.pattern, PatternStr):
            return f"'{terminal.pattern.value}'"
        return name

    def terminal_regexp(self, name: str) -> str:
        """Regular expression source of the grammar terminal `name`."""
        return self.parser.get_terminal(name).pattern.to_regexp()

    # --- Positions ---

    @staticmethod
    def _span(tree: Tree[Any]) -> SourceSpan | None:
        meta = tree.meta
        if meta.empty:
            return None
        return SourceSpan(
            start=meta.start_pos,
            end=meta.end_pos,
            line=meta.line,
            column=meta.column,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    # --- Statements ---

    def _convert_program(self, tree: Tree[Any]) -> ASTProgram:
        statements = tuple(self._convert_statement(child) for child in tree.children)
        return ASTProgram(statements=statements, span=self._span(tree))

    def _convert_block(self, tree: Tree[Any]) -> ASTBlock:
        if not isinstance(tree, Tree) or tree.data != 'block':
            raise TypeError(f"Expected Tree 'block', got {type(tree)}")
        statements = tuple(self._convert_statement(child) for child in tree.children)
        return ASTBlock(statements=statements, span=self._span(tree))

    def _convert_statement(self, node: Tree[Any] | Token) -> ASTStatement | ASTExpression:
        if not isinstance(node, Tree):
            raise ValueError(f"Expected Tree node for statement, got {type(node)}")

        if node.data == 'if_stmt':
            return self._convert_if_stmt(node)
        elif node.data == 'while_stmt':
            return self._convert_while_stmt(node)
        elif node.data == 'assignment':
            return self._convert_assignment(node)
        elif node.data == 'function_def':
            return self._convert_function_def(node)
        else:
            # Bare expression statement
            return self._convert_expression(node)

    def _convert_if_stmt(self, tree: Tree[Any]) -> ASTIfStatement:
        condition_tree, then_tree, else_tree = tree.children
        else_block = self._convert_block(else_tree) if else_tree is not None else None
        return ASTIfStatement(
            condition=self._convert_expression(condition_tree),
            then_block=self._convert_block(then_tree),
            else_block=else_block,
            span=self._span(tree),
        )

    def _convert_while_stmt(self, tree: Tree[Any]) -> ASTWhileStatement:
        condition_tree, body_tree = tree.children
        return ASTWhileStatement(
            condition=self._convert_expression(condition_tree),
            body=self._convert_block(body_tree),
            span=self._span(tree),
        )

    def _convert_assignment(self, tree: Tree[Any]) -> ASTAssignmentStatement:
        name_token, value_tree = tree.children
        if not (isinstance(name_token, Token) and name_token.type == 'NAME'):
            raise TypeError(f"Expected NAME Token for assignment target, got {type(name_token)}")

        value: ASTExpression | ASTFunctionDefinition
        if isinstance(value_tree, Tree) and value_tree.data == 'function_def':
            value = self._convert_function_def(value_tree)
        else:
            value = self._convert_expression(value_tree)

        return ASTAssignmentStatement(name=name_token.value, value=value, span=self._span(tree))

    def _convert_function_def(self, tree: Tree[Any]) -> ASTFunctionDefinition:
        # Optional name and parameter arrive as None placeholders
        name_token, parameter_token, body_tree = tree.children
        return ASTFunctionDefinition(
            name=name_token.value if name_token is not None else None,
            parameter=parameter_token.value if parameter_token is not None else None,
            body=self._convert_block(body_tree),
            span=self._span(tree),
        )

    # --- Expressions ---

    def _convert_expression(self, tree: Tree[Any] | Token) -> ASTExpression:
        if isinstance(tree, Token):
            raise ValueError(f"Unexpected Token '{tree.value}' ({tree.type}) found directly in expression conversion.")

        rule_name = tree.data
        children = tree.children
        span = self._span(tree)

        if rule_name == 'number':
            token = cast(Token, children[0])
            return ASTNumberLiteralExpression(value=int(token.value), span=span)
        elif rule_name == 'variable':
            token = cast(Token, children[0])
            return ASTVariableExpression(name=token.value, span=span)
        elif rule_name == 'call':
            name_token, arguments_tree = children
            return ASTCallExpression(
                name=cast(Token, name_token).value,
                arguments=self._convert_arguments(arguments_tree),
                span=span,
            )
        elif rule_name == 'list':
            return ASTListLiteralExpression(elements=self._convert_arguments(children[0]), span=span)
        elif rule_name == 'expr':
            return self._convert_binary_chain(tree)
        else:
            raise ValueError(f"Unknown or unhandled expression type (Tree data): {rule_name}")

    def _convert_arguments(self, tree: Tree[Any] | None) -> tuple[ASTExpression, ...]:
        if tree is None:
            return ()
        return tuple(self._convert_expression(child) for child in tree.children)

    def _convert_binary_chain(self, tree: Tree[Any]) -> ASTBinaryChainExpression:
        first, *tail = tree.children
        if len(tail) % 2 != 0:
            raise ValueError(f"Unexpected structure for operator chain with {len(tree.children)} children.")

        rest = tuple(
            (self._convert_binary_operator(tail[i]), self._convert_expression(tail[i + 1]))
            for i in range(0, len(tail), 2)
        )
        return ASTBinaryChainExpression(first=self._convert_expression(first), rest=rest, span=self._span(tree))

    @staticmethod
    def _convert_binary_operator(token: Token) -> ASTBinaryOperator:
        try:
            return ASTBinaryOperator(token.value)
        except ValueError:
            raise ValueError(f"Unknown binary operator token: type={token.type}, value={token.value}") from None


def _deepest_opening(code: str) -> int:
    """Offset of the first bracket opened at the greatest nesting depth, or 0."""
    depth = deepest = offset = 0
    in_comment = False
    for i, char in enumerate(code):
        if in_comment:
            in_comment = char != "\n"
        elif code.startswith("//", i):
            in_comment = True
        elif char in "([{":
            depth += 1
            if depth > deepest:
                deepest, offset = depth, i
        elif char in ")]}":
            depth -= 1
    return offset


@lru_cache(maxsize=None)
def default_parser() -> Parser:
    return Parser()


def parse(code: str, source_name: str = DEFAULT_SOURCE_NAME) -> ASTProgram:
    """Parse `code` with a shared parser instance."""
    return default_parser().parse(code, source_name)
