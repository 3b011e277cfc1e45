"""Owns the JavaScript runtime the LESS engine runs in.

The runtime is a single ``node`` process, started on :meth:`init` and
kept alive until :meth:`close`. Requests go to it as JSON lines over
stdin, answers come back over stdout (see the bundled ``host.js``).
"""

import json
import logging
import re
import subprocess
import time

from lesscompiler.exceptions import (
    ConfigurationError, InitializationError, JavaScriptError, ScriptError)
from lesscompiler.locators import BundledScript


__all__ = ('ScriptEngineSession',)


log = logging.getLogger(__name__)


IDENTIFIER_RE = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')

# Prefix of the lines host.js answers with.
MARKER = '@@lesscompiler@@'


class ScriptEngineSession(object):
    """A persistent scope inside a JavaScript runtime.

    :meth:`init` loads the browser shim, the LESS engine, any extension
    scripts and finally the bundled ``compile.js`` into one scope, in
    that order, so that every script sees what the ones before it
    defined. Each script is evaluated exactly once; afterwards
    :meth:`evaluate` can be called any number of times.

    A session is not thread-safe. Only one evaluation may be in progress
    at a time, including the first one which triggers initialization.
    """

    host_script = BundledScript('host.js')
    compile_script = BundledScript('compile.js')

    def __init__(self):
        self.process = None
        self.binary = None
        self.failed = None
        self.scripts = []
        self.init_duration = None
        self._ready = False

    @property
    def initialized(self):
        return self._ready

    def spawn(self, binary):
        """Start the node process which hosts the scope."""
        return subprocess.Popen(
            [binary, '-e', self.host_script.read()],
            stdin=subprocess.PIPE, stdout=subprocess.PIPE,
            encoding='utf-8')

    def init(self, config):
        """Set up the runtime using the scripts named in ``config``.

        Does nothing if the session is already initialized. If a previous
        attempt failed, the same error is raised again; a failed session
        is never retried.
        """
        if self.failed is not None:
            raise self.failed
        if self.initialized:
            return

        start = time.time()

        try:
            scripts = config.scripts() + [self.compile_script]
        except ValueError as e:
            raise ConfigurationError(e)

        self.binary = config.binary or 'node'
        try:
            self.process = self.spawn(self.binary)
        except (IOError, OSError) as e:
            self._fail('node binary "%s"' % self.binary, e)

        loaded = []
        for locator in scripts:
            try:
                source = locator.read()
            except (IOError, OSError, ValueError) as e:
                self._fail(locator.name, e)
            try:
                self._request({'op': 'load', 'name': locator.name,
                               'source': source})
            except ScriptError as e:
                self._fail(locator.name, e.cause)
            loaded.append(locator.name)

        self.scripts = loaded
        self._ready = True
        self.init_duration = (time.time() - start) * 1000
        log.debug('Finished initialization of LESS compiler in %d ms '
                  '(binary: %s, scripts: %s)', self.init_duration,
                  self.binary, ', '.join(loaded))

    def _fail(self, name, cause):
        error = InitializationError(name, cause)
        log.error('Failed to initialize LESS compiler, could not load '
                  '%s: %s', name, cause)
        self._stop()
        self.failed = error
        raise error

    def _request(self, request):
        process = self.process
        try:
            process.stdin.write(json.dumps(request) + '\n')
            process.stdin.flush()
            while True:
                line = process.stdout.readline()
                if not line:
                    raise IOError('%s exited unexpectedly' % self.binary)
                if line.startswith(MARKER):
                    break
                log.debug('%s: %s', self.binary, line.rstrip())
        except (IOError, OSError, ValueError) as e:
            # The process is gone; a later init() starts a new one.
            self._stop()
            raise ScriptError(e)

        response = json.loads(line[len(MARKER):])
        if 'error' in response:
            error = response['error']
            raise ScriptError(JavaScriptError(
                error.get('message'), error.get('name'),
                error.get('stack')))
        return response.get('ok')

    def evaluate(self, script, bindings=None, result='result'):
        """Run ``script`` in the session's scope and return the value of
        the variable ``result`` afterwards.

        Every name in ``bindings`` is set for this call only, from the
        JSON encoding of its value; ``result`` starts out as an empty
        string unless it is bound explicitly. Nothing carries over from
        one call to the next except what the loaded scripts defined.
        """
        if not self.initialized:
            raise ScriptError('session is not initialized')

        bindings = bindings or {}
        for name in list(bindings) + [result]:
            if not IDENTIFIER_RE.match(name):
                raise ValueError('Not a valid binding name: %r' % name)

        return self._request({'op': 'eval', 'code': script,
                              'bindings': bindings, 'result': result})

    def _stop(self):
        process, self.process = self.process, None
        self._ready = False
        if process is None:
            return
        try:
            process.stdin.close()
        except (IOError, OSError) as e:
            log.debug('Error closing pipe to %s: %s', self.binary, e)
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def close(self):
        """Stop the runtime. The session can be initialized again
        afterwards, for example with a corrected configuration.
        """
        self._stop()
        self.failed = None
        self.scripts = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
