"""
Lark-based parser turning Entish source text into model statements.
"""
from .entish_parser import EntishParser, EntishTransformer, entish_grammar

__all__ = ['EntishParser', 'EntishTransformer', 'entish_grammar']
