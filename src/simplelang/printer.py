from __future__ import annotations

from simplelang.ast_nodes import (
    ASTNode, ASTProgram, ASTBlock, ASTStatement, ASTExpression, ASTAssignmentStatement, ASTWhileStatement,
    ASTIfStatement, ASTFunctionDefinition, ASTNumberLiteralExpression, ASTVariableExpression,
    ASTCallExpression, ASTListLiteralExpression, ASTBinaryChainExpression
)
from simplelang.config import INDENT


class ASTPrinter:
    """Emits canonical source text; parsing the output gives back an equal tree."""

    def format(self, node: ASTNode) -> str:
        if isinstance(node, ASTProgram):
            return self.format_program(node)
        if isinstance(node, ASTBlock):
            return self._format_block(node, 0)
        if isinstance(node, ASTExpression):
            return self._format_expression(node)
        return "\n".join(self._format_statement(node, 0))

    def format_program(self, program: ASTProgram) -> str:
        lines: list[str] = []
        for statement in program.statements:
            lines.extend(self._format_statement(statement, 0))
        return "\n".join(lines) + "\n" if lines else ""

    def _format_block(self, block: ASTBlock, depth: int) -> str:
        if not block.statements:
            return "{}"
        lines = ["{"]
        for statement in block.statements:
            lines.extend(self._format_statement(statement, depth + 1))
        lines.append(INDENT * depth + "}")
        return "\n".join(lines)

    def _format_statement(self, statement: ASTStatement | ASTExpression, depth: int) -> list[str]:
        indent = INDENT * depth
        if isinstance(statement, ASTIfStatement):
            text = f"if ({self._format_expression(statement.condition)}) {self._format_block(statement.then_block, depth)}"
            if statement.else_block is not None:
                text += f" else {self._format_block(statement.else_block, depth)}"
        elif isinstance(statement, ASTWhileStatement):
            text = f"while ({self._format_expression(statement.condition)}) {self._format_block(statement.body, depth)}"
        elif isinstance(statement, ASTAssignmentStatement):
            if isinstance(statement.value, ASTFunctionDefinition):
                value = self._format_function(statement.value, depth)
            else:
                value = self._format_expression(statement.value)
            text = f"{statement.name} = {value};"
        elif isinstance(statement, ASTFunctionDefinition):
            text = self._format_function(statement, depth)
        elif isinstance(statement, ASTExpression):
            text = self._format_expression(statement)
        else:
            raise TypeError(f"Unknown statement type: {type(statement).__name__}")
        return [indent + text]

    def _format_function(self, function: ASTFunctionDefinition, depth: int) -> str:
        name = f" {function.name}" if function.name is not None else ""
        parameter = function.parameter or ""
        return f"function{name}({parameter}) {self._format_block(function.body, depth)}"

    def _format_expression(self, expression: ASTExpression) -> str:
        if isinstance(expression, ASTNumberLiteralExpression):
            return str(expression.value)
        elif isinstance(expression, ASTVariableExpression):
            return expression.name
        elif isinstance(expression, ASTCallExpression):
            arguments = ", ".join(self._format_expression(argument) for argument in expression.arguments)
            return f"{expression.name}({arguments})"
        elif isinstance(expression, ASTListLiteralExpression):
            elements = ", ".join(self._format_expression(element) for element in expression.elements)
            return f"[{elements}]"
        elif isinstance(expression, ASTBinaryChainExpression):
            parts = [self._format_factor(expression.first)]
            for operator, factor in expression.rest:
                parts.append(operator.value)
                parts.append(self._format_factor(factor))
            return " ".join(parts)
        else:
            raise TypeError(f"Unknown expression type: {type(expression).__name__}")

    def _format_factor(self, factor: ASTExpression) -> str:
        # A chain inside a chain only comes from parentheses
        if isinstance(factor, ASTBinaryChainExpression):
            return f"({self._format_expression(factor)})"
        return self._format_expression(factor)


def format_program(program: ASTProgram) -> str:
    return ASTPrinter().format_program(program)


def format_node(node: ASTNode) -> str:
    return ASTPrinter().format(node)
