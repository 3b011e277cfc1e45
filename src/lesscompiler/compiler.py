import locale
import logging
import os
import time

from lesscompiler.config import CompilerConfiguration
from lesscompiler.engine import (
    CompileOptions, OpaqueFailure, StructuredError, compile_css)
from lesscompiler.exceptions import ConfigurationError, LessError
from lesscompiler.session import ScriptEngineSession
from lesscompiler.source import LessSource
from lesscompiler.updater import AlwaysUpdater, get_updater
from lesscompiler.utils import write_file_atomic


__all__ = ('LessCompiler',)


log = logging.getLogger(__name__)


class LessCompiler(object):
    """Compiles LESS sources to CSS stylesheets.

    The compiler does not implement LESS itself. It runs the official
    LESS JavaScript engine in a ``node`` process of its own; the
    engine and a small browser shim are loaded the first time something
    is compiled, and reused for every compile after that::

        compiler = LessCompiler()
        css = compiler.compile('@color: #4D926F; #header { color: @color; }')

    Options are described in
    :class:`~lesscompiler.config.CompilerConfiguration`; they can be
    passed as keyword arguments, through ``config``, or via the OS
    environment. ``compress`` and ``encoding`` may be changed at any
    time. The script locations are fixed once the compiler has been
    initialized.

    ``updater`` decides whether :meth:`compile_to` needs to do anything
    when not forced; by default this is the ``timestamp`` updater.

    An instance must only be used by one thread at a time. To compile
    in parallel, give each thread its own compiler.
    """

    def __init__(self, config=None, updater='timestamp', session=None,
                 **options):
        self.configuration = CompilerConfiguration(config, **options)
        self.session = session if session is not None else \
            ScriptEngineSession()
        try:
            self.updater = get_updater(updater or 'timestamp')
        except ValueError as e:
            raise ConfigurationError(e)

    def _get_compress(self):
        return self.configuration.compress
    def _set_compress(self, value):
        self.configuration.compress = bool(value)
    compress = property(_get_compress, _set_compress, doc="""
    Whether the generated CSS is compressed. Applies to the next call.
    """)

    def _get_encoding(self):
        return self.configuration.encoding
    def _set_encoding(self, value):
        self.configuration.encoding = value
    encoding = property(_get_encoding, _set_encoding, doc="""
    Character encoding used when writing output files. If not set, the
    platform default is used.
    """)

    def init(self):
        """Initialize the JavaScript runtime.

        It is not needed to call this method manually, as it is called
        implicitly by the compile methods if needed.
        """
        if self.session.initialized:
            return
        self.configuration.freeze()
        try:
            self.session.init(self.configuration)
        except ConfigurationError:
            self.configuration.unfreeze()
            raise

    def close(self):
        """Release the JavaScript runtime. The compiler may be
        reconfigured and used again afterwards.
        """
        self.session.close()
        self.configuration.unfreeze()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def compile(self, input):
        """Compile ``input`` to CSS and return it.

        ``input`` is either a string of LESS code, or a
        :class:`~lesscompiler.source.LessSource`. A ``pathlib.Path`` is
        read as a file, see :meth:`compile_file`.

        Raises :class:`~lesscompiler.exceptions.LessError` if the input
        cannot be compiled.
        """
        if isinstance(input, os.PathLike):
            return self.compile_file(input)
        options = CompileOptions(compress=self.compress)
        if isinstance(input, LessSource):
            options.filename = input.filename
            options.paths = input.paths
            input = input.normalized_content

        self.init()

        start = time.time()
        try:
            css = compile_css(self.session, input, options)
        except StructuredError as e:
            raise LessError(e.message, cause=e, **e.details())
        except OpaqueFailure as e:
            raise LessError(cause=e.cause)

        log.debug('Finished compilation of LESS source in %d ms.',
                  (time.time() - start) * 1000)
        return css

    def compile_file(self, input):
        """Compile the LESS file ``input``, including its imports.

        Raises ``IOError`` if the file or one of its imports cannot be
        read.
        """
        return self.compile(LessSource(input))

    def compile_to(self, input, output, force=True):
        """Compile ``input`` and write the CSS to the file ``output``.

        ``input`` can be a filename or a
        :class:`~lesscompiler.source.LessSource`.

        If ``force`` is ``False``, nothing is done unless the updater
        finds that ``output`` is out of date; with the default updater,
        that means it does not exist, or the source or one of its imports
        has been modified since it was written.

        Returns ``True`` if the output was written.
        """
        if not isinstance(input, LessSource):
            input = LessSource(input)

        updater = AlwaysUpdater() if force else self.updater
        if not updater.needs_rebuild(input, output):
            log.info('%s is up to date, not compiling %s',
                     output, input.filename)
            return False

        log.info('Compiling %s to %s', input.filename, output)
        css = self.compile(input)
        write_file_atomic(output, css,
                          self.encoding or locale.getpreferredencoding(False))
        updater.build_done(input, output)
        return True
