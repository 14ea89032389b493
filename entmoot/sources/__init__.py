from .loader import SourceLoader

__all__ = ['SourceLoader']
