__all__ = ('CompilerError', 'ConfigurationError', 'InitializationError',
           'ScriptError', 'JavaScriptError', 'LessError',)


class CompilerError(Exception):
    pass


class ConfigurationError(CompilerError):
    pass


class InitializationError(CompilerError):
    """One of the scripts the compiler depends on could not be read or
    evaluated. The session that raised this will not try again.
    """

    def __init__(self, script, cause):
        CompilerError.__init__(
            self, 'Failed to initialize LESS compiler, could not load '
                  '%s: %s' % (script, cause))
        self.script = script
        self.cause = cause


class ScriptError(CompilerError):
    """Script execution inside the JavaScript runtime failed."""

    def __init__(self, cause):
        CompilerError.__init__(self, 'script execution failed: %s' % cause)
        self.cause = cause


class JavaScriptError(CompilerError):
    """An exception thrown by JavaScript code, as reported by node."""

    def __init__(self, message, name=None, stack=None):
        CompilerError.__init__(
            self, '%s: %s' % (name, message) if name else message)
        self.message = message
        self.name = name
        self.stack = stack


class LessError(CompilerError):
    """The LESS source could not be compiled.

    If the LESS engine reported the problem itself, ``message`` is the
    engine's message, and ``type``, ``filename``, ``line``, ``column``
    and ``extract`` hold whatever additional details it provided.
    Otherwise only ``cause`` is set.
    """

    def __init__(self, message=None, cause=None, type=None, filename=None,
                 line=None, column=None, extract=None):
        CompilerError.__init__(self, message if message else str(cause))
        self.message = message
        self.cause = cause
        self.type = type
        self.filename = filename
        self.line = line
        self.column = column
        self.extract = extract

    def __str__(self):
        if self.message and self.line is not None:
            return '%s (line %s, column %s)' % (
                self.message, self.line, self.column)
        return CompilerError.__str__(self)
