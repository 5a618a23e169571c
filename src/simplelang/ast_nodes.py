from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from simplelang.source_span import SourceSpan


class ASTBinaryOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    LESS = "<"
    GREATER = ">"
    EQUAL = "=="


@dataclass(frozen=True)
class ASTNode:
    # Where the node came from; ignored when comparing trees.
    span: SourceSpan | None = field(default=None, compare=False, repr=False, kw_only=True)


@dataclass(frozen=True)
class ASTExpression(ASTNode):
    pass


@dataclass(frozen=True)
class ASTNumberLiteralExpression(ASTExpression):
    value: int


@dataclass(frozen=True)
class ASTVariableExpression(ASTExpression):
    name: str


@dataclass(frozen=True)
class ASTCallExpression(ASTExpression):
    name: str
    arguments: tuple[ASTExpression, ...]


@dataclass(frozen=True)
class ASTListLiteralExpression(ASTExpression):
    elements: tuple[ASTExpression, ...]


@dataclass(frozen=True)
class ASTBinaryChainExpression(ASTExpression):
    """A flat operator chain: `first op1 f1 op2 f2 ...`, kept in source order without precedence."""
    first: ASTExpression
    rest: tuple[tuple[ASTBinaryOperator, ASTExpression], ...]

    @property
    def operators(self) -> tuple[ASTBinaryOperator, ...]:
        return tuple(operator for operator, _ in self.rest)

    @property
    def factors(self) -> tuple[ASTExpression, ...]:
        return (self.first,) + tuple(factor for _, factor in self.rest)


@dataclass(frozen=True)
class ASTStatement(ASTNode):
    pass


@dataclass(frozen=True)
class ASTBlock(ASTNode):
    statements: tuple[ASTStatement | ASTExpression, ...]


@dataclass(frozen=True)
class ASTFunctionDefinition(ASTStatement):
    name: str | None
    parameter: str | None
    body: ASTBlock


@dataclass(frozen=True)
class ASTAssignmentStatement(ASTStatement):
    name: str
    value: ASTExpression | ASTFunctionDefinition


@dataclass(frozen=True)
class ASTWhileStatement(ASTStatement):
    condition: ASTExpression
    body: ASTBlock


@dataclass(frozen=True)
class ASTIfStatement(ASTStatement):
    condition: ASTExpression
    then_block: ASTBlock
    else_block: ASTBlock | None


@dataclass(frozen=True)
class ASTProgram(ASTNode):
    statements: tuple[ASTStatement | ASTExpression, ...]
