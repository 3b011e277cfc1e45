__version__ = (0, 1, 0)


# Make a couple frequently used things available right here.
from .compiler import LessCompiler
from .source import LessSource
from .exceptions import (
    CompilerError, ConfigurationError, InitializationError,
    JavaScriptError, LessError)


__all__ = ('LessCompiler', 'LessSource', 'CompilerError',
           'ConfigurationError', 'InitializationError', 'JavaScriptError',
           'LessError',)
