""" Rendered TypeScript type expressions """

from enum import Enum
from typing import List, Tuple


class VoidType(Enum):
    """The literal used for a type reference that may hold no value."""
    NULL = 'null'
    UNDEFINED = 'undefined'

    @property
    def js_type_name(self) -> str:
        return self.value


def scan_top_level(ts_text: str) -> Tuple[bool, bool]:
    """
    Scan a TypeScript type expression outside any brackets, braces or
    parentheses.

    Returns:
        Tuple[bool, bool]: whether a '|' and whether a '=>' occur at the top level.
    """
    depth = 0
    previous = ''
    has_union = False
    has_arrow = False
    for char in ts_text:
        if char in '([{<':
            depth += 1
        elif char in ')]}':
            depth -= 1
        elif char == '>':
            if previous == '=':
                has_arrow = has_arrow or depth == 0
            else:
                depth -= 1
        elif char == '|' and depth == 0:
            has_union = True
        previous = char
    return has_union, has_arrow


def needs_parenthesis(ts_text: str) -> bool:
    """True if the expression is a top-level union or function type."""
    has_union, has_arrow = scan_top_level(ts_text)
    return has_union or has_arrow


class TypeScriptType:
    """
    A formatted TypeScript type: a list of union members.

    A type with more than one member, or whose single member is itself a
    top-level union or function type, needs parentheses when embedded in a
    postfix array type.
    """

    def __init__(self, members: List[str]) -> None:
        self.members = members

    @staticmethod
    def single(ts_type: str, nullable: bool, void_type: VoidType) -> 'TypeScriptType':
        """Creates a type from one expression, adding the void member when nullable. 'any' already includes it."""
        if nullable and ts_type != 'any':
            if scan_top_level(ts_type)[1]:
                ts_type = f'({ts_type})'
            return TypeScriptType([ts_type, void_type.js_type_name])
        return TypeScriptType([ts_type])

    @property
    def is_union(self) -> bool:
        return len(self.members) > 1 or any(needs_parenthesis(m) for m in self.members)

    def format_without_parenthesis(self) -> str:
        return ' | '.join(self.members)

    def format_with_parenthesis(self) -> str:
        if self.is_union:
            return f'({self.format_without_parenthesis()})'
        return self.format_without_parenthesis()

    def __str__(self) -> str:
        return self.format_without_parenthesis()

    def __repr__(self) -> str:
        return f'TypeScriptType({self.members!r})'
