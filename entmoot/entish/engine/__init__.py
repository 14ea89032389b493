"""
Entish engine: fact storage, clause search, evaluation and the interpreter.
"""
from .errors import EngineError, UnsupportedFunctionError, ClaimFailure, SourceError
from .interpreter import Interpreter

__all__ = ['Interpreter', 'EngineError', 'UnsupportedFunctionError', 'ClaimFailure', 'SourceError']
