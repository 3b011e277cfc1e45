import json
import os
import shutil
import tempfile
import time

from mock import Mock


__all__ = ('TempDirHelper', 'FakeHost', 'make_session',)


class TempDirHelper(object):
    """Base class for tests that need to create files in a temporary
    directory.
    """

    default_files = {}

    def setup_method(self, method=None):
        self.tempdir = tempfile.mkdtemp()
        self.create_files(self.default_files)

    def teardown_method(self, method=None):
        shutil.rmtree(self.tempdir)

    def create_files(self, files):
        """Helper that allows to quickly create a bunch of files in
        the temporary directory.
        """
        for name, data in files.items():
            dirs = os.path.dirname(self.path(name))
            if not os.path.exists(dirs):
                os.makedirs(dirs)
            with open(self.path(name), 'w', encoding='utf-8') as f:
                f.write(data)

    def exists(self, name):
        return os.path.exists(self.path(name))

    def get(self, name, encoding='utf-8'):
        """Return the given file's contents."""
        with open(self.path(name), 'r', encoding=encoding) as f:
            return f.read()

    def path(self, name):
        return os.path.join(self.tempdir, name)

    def setmtime(self, *files, **kwargs):
        """Set the mtime of the given files. Useful helper when
        needing to test things like the timestamp updater.

        Specify ``mtime`` as a keyword argument, or time.time()
        will automatically be used. Returns the mtime used.
        """
        mtime = kwargs.pop('mtime', time.time())
        assert not kwargs, "Unsupported kwargs: %s" % ', '.join(kwargs.keys())
        for f in files:
            os.utime(self.path(f), (mtime, mtime))
        return mtime


class FakeHost(object):
    """Stands in for the node process of a session. Every request
    written to stdin is recorded in ``requests`` and answered through
    ``respond(request)``, which by default reports success.
    """

    def __init__(self, respond=None):
        self.requests = []
        self.respond = respond or (lambda request: {'ok': True})
        self.stdin = self.stdout = self
        self.closed = False
        self.killed = False
        self.returncode = None
        self._buffer = ''
        self._lines = []

    def write(self, data):
        if self.closed:
            raise ValueError('I/O operation on closed file.')
        self._buffer += data

    def flush(self):
        from lesscompiler.session import MARKER
        while '\n' in self._buffer:
            line, self._buffer = self._buffer.split('\n', 1)
            request = json.loads(line)
            self.requests.append(request)
            response = self.respond(request)
            if response is not None:
                self._lines.append(
                    '%s %s\n' % (MARKER, json.dumps(response)))

    def readline(self):
        return self._lines.pop(0) if self._lines else ''

    def emit(self, line):
        """Queue a line of stray output."""
        self._lines.append(line)

    def close(self):
        self.closed = True

    def wait(self, timeout=None):
        self.returncode = 0
        return 0

    def kill(self):
        self.killed = True

    def ops(self, op):
        return [r for r in self.requests if r['op'] == op]


def make_session(evaluate=None):
    """A session mock which behaves as if it were initialized once
    ``init()`` has been called.
    """
    from lesscompiler.session import ScriptEngineSession
    session = Mock(spec=ScriptEngineSession)
    session.initialized = False

    def init(config):
        session.initialized = True
    session.init.side_effect = init
    if evaluate is not None:
        session.evaluate.side_effect = evaluate
    return session
