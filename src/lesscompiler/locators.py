"""Script locators point the compiler to the JavaScript it loads into
the runtime: the browser shim, the LESS engine, and any extensions.
"""

import os
import pkgutil
from urllib.parse import urlparse
from urllib.request import urlopen


__all__ = ('ScriptLocator', 'BundledScript', 'FileScript', 'UrlScript',
           'InlineScript', 'get_script',)


class ScriptLocator(object):
    """Abstract base class.
    """

    encoding = 'utf-8'

    @property
    def name(self):
        """A stable, human-readable name used in error messages.
        """
        raise NotImplementedError()

    def read(self):
        raise NotImplementedError()

    def __eq__(self, other):
        if isinstance(other, ScriptLocator):
            return type(self) == type(other) and self.name == other.name
        return False

    def __hash__(self):
        return hash((type(self), self.name))

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)


class BundledScript(ScriptLocator):
    """A script shipped in the ``lesscompiler/data`` directory.
    """

    def __init__(self, filename):
        self.filename = filename

    @property
    def name(self):
        return self.filename

    def read(self):
        data = pkgutil.get_data('lesscompiler', 'data/%s' % self.filename)
        if data is None:
            raise IOError('bundled script not found: %s' % self.filename)
        return data.decode(self.encoding)


class FileScript(ScriptLocator):

    def __init__(self, filename, encoding=None):
        self.filename = filename
        if encoding:
            self.encoding = encoding

    @property
    def name(self):
        return self.filename

    def read(self):
        with open(self.filename, 'r', encoding=self.encoding) as f:
            return f.read()


class UrlScript(ScriptLocator):

    def __init__(self, url):
        self.url = url

    @property
    def name(self):
        return self.url

    def read(self):
        r = urlopen(self.url)
        try:
            return r.read().decode(self.encoding)
        finally:
            r.close()


class InlineScript(ScriptLocator):
    """Script source given directly as a string."""

    def __init__(self, source, name=None):
        self.source = source
        self._name = name or '<inline:%x>' % (hash(source) & 0xffffffff)

    @property
    def name(self):
        return self._name

    def read(self):
        return self.source


def get_script(value):
    """Resolves ``value`` to a script locator.

    Accepts a locator instance, a ``file:``, ``http:`` or ``https:`` url,
    or a filesystem path.
    """
    if isinstance(value, ScriptLocator):
        return value
    if isinstance(value, os.PathLike):
        return FileScript(os.fspath(value))
    if isinstance(value, str):
        scheme = urlparse(value).scheme
        if scheme in ('http', 'https', 'file'):
            return UrlScript(value)
        return FileScript(value)
    raise ValueError('Unable to resolve to a script: %r' % (value,))
