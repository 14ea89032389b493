"""
Entish syntax tree: expressions, clauses, statements and bindings.
"""
from .terms import (
    Term, Constant, Boolean, String, Number, Roll, Variable,
    BinaryOperation, Function, Comparison, Expression, WILDCARD, is_constant,
)
from .literal import Fact, Conjunction, Disjunction, ExclusiveDisjunction, Clause
from .rule import Inference, Comment, Claim, Query, Rolling, Statement, statement_to_string
from .binding import Binding
from .schema import RelationSchema

__all__ = [
    'Term', 'Constant', 'Boolean', 'String', 'Number', 'Roll', 'Variable',
    'BinaryOperation', 'Function', 'Comparison', 'Expression', 'WILDCARD', 'is_constant',
    'Fact', 'Conjunction', 'Disjunction', 'ExclusiveDisjunction', 'Clause',
    'Inference', 'Comment', 'Claim', 'Query', 'Rolling', 'Statement', 'statement_to_string',
    'Binding', 'RelationSchema',
]
