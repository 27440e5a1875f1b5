"""Classification engine implementations.

Importing this package registers every bundled engine with the
lyra.engine registry and sets the default.
"""

from lyra.engines.lexical import LEXICAL_VERSION, LexicalEngine

__all__ = ["LEXICAL_VERSION", "LexicalEngine"]
