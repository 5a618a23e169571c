import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from simplelang.ast_nodes import ASTNode
from simplelang.source_span import SourceSpan


def debug_ast(node: Any, indent: int | None = 2, include_spans: bool = False) -> str:
    def ast_to_dict(n: Any) -> Any:
        if isinstance(n, (list, tuple)):
            return [ast_to_dict(child) for child in n]
        elif isinstance(n, SourceSpan):
            return str(n)
        elif is_dataclass(n):
            result: dict[str, Any] = {}
            if isinstance(n, ASTNode):
                result["node"] = type(n).__name__.removeprefix("AST")
            for f in fields(n):
                if f.name == "span" and not include_spans:
                    continue
                result[f.name] = ast_to_dict(getattr(n, f.name))
            return result
        elif isinstance(n, Enum):
            return n.name
        else:
            return n

    return json.dumps(ast_to_dict(node), indent=indent)
