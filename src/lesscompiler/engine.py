"""The boundary between the compiler and the LESS engine running inside
a :class:`~lesscompiler.session.ScriptEngineSession`.

Whatever goes wrong on the other side comes back as one of two
failures: a :class:`StructuredError`, if the engine reported a problem
with the LESS source, or an :class:`OpaqueFailure` for everything else.
"""

from lesscompiler.exceptions import ScriptError


__all__ = ('CompileOptions', 'EngineFailure', 'StructuredError',
           'OpaqueFailure', 'compile_css', 'COMPILE_SCRIPT',)


# Calls the function defined by the bundled compile.js.
COMPILE_SCRIPT = 'result = lesscompilerCompile(input, options);'


class CompileOptions(object):
    """What the engine is told besides the source text. ``filename`` and
    ``paths`` are where imports the engine resolves itself are looked up.
    """

    def __init__(self, compress=False, filename=None, paths=()):
        self.compress = bool(compress)
        self.filename = filename
        self.paths = list(paths)

    def to_dict(self):
        return {'compress': self.compress, 'filename': self.filename,
                'paths': self.paths}

    def __eq__(self, other):
        if isinstance(other, CompileOptions):
            return self.to_dict() == other.to_dict()
        return NotImplemented

    def __repr__(self):
        return '<CompileOptions compress=%s filename=%s>' % (
            self.compress, self.filename)


class EngineFailure(Exception):
    pass


class StructuredError(EngineFailure):
    """The engine rejected the input and said why."""

    def __init__(self, message, type=None, filename=None, line=None,
                 column=None, extract=None):
        EngineFailure.__init__(self, message)
        self.message = message
        self.type = type
        self.filename = filename
        self.line = line
        self.column = column
        self.extract = extract

    def details(self):
        return dict(type=self.type, filename=self.filename, line=self.line,
                    column=self.column, extract=self.extract)


class OpaqueFailure(EngineFailure):
    """Execution failed in a way that carries no LESS error details."""

    def __init__(self, cause):
        EngineFailure.__init__(self, cause)
        self.cause = cause


def compile_css(session, text, options):
    """Compile ``text`` in ``session``, which must be initialized.

    Returns the CSS, or raises one of the :class:`EngineFailure` kinds.
    """
    try:
        result = session.evaluate(COMPILE_SCRIPT, {
            'input': text, 'options': options.to_dict()})
    except ScriptError as e:
        raise OpaqueFailure(e.cause)

    if isinstance(result, dict):
        if isinstance(result.get('error'), dict):
            error = result['error']
            raise StructuredError(
                error['message'] if 'message' in error
                else 'unknown error',
                type=error.get('type'), filename=error.get('filename'),
                line=error.get('line'), column=error.get('column'),
                extract=error.get('extract'))
        if isinstance(result.get('css'), str):
            return result['css']
    raise OpaqueFailure(
        ValueError('unexpected result from LESS engine: %r' % (result,)))
