"""
Entmoot: a forward-chaining rule engine for the Entish language.
"""
from .entish.engine.interpreter import Interpreter
from .entish.engine.errors import EngineError, UnsupportedFunctionError, ClaimFailure, SourceError

__all__ = ['Interpreter', 'EngineError', 'UnsupportedFunctionError', 'ClaimFailure', 'SourceError']
