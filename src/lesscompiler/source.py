"""A LESS file together with everything it imports.
"""

import errno
import logging
import os
import re

from lesscompiler.utils import get_timestamp


__all__ = ('LessSource',)


log = logging.getLogger(__name__)


IMPORT_RE = re.compile(
    r'''@import\s+
        (?:\((?P<options>[\w\s,-]*)\)\s*)?      # (less), (once), ...
        (?P<url>url\(\s*)?
        (?P<quote>['"]?)(?P<path>[^'"\s;)]+)(?P=quote)
        (?(url)\s*\))
        \s*(?P<media>[^;]*?)\s*;''', re.VERBOSE)

# Strings and unquoted urls are matched too, so that comment markers
# inside them are not taken for comments.
COMMENT_RE = re.compile(
    r'''"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|url\([^)'"]*\)
        |(?P<comment>/\*.*?(?:\*/|\Z)|//[^\n]*)''', re.VERBOSE | re.DOTALL)

# Import options we can honour by inlining the file ourselves. Anything
# else is left for the engine to deal with.
INLINE_OPTIONS = frozenset(('less', 'once', 'multiple'))


def _import_options(match):
    return set(o.strip() for o in (match.group('options') or '').split(',')
               if o.strip())


def _is_url(path):
    return '://' in path or path.startswith('//')


def _can_inline(match):
    path = match.group('path')
    options = _import_options(match)
    if options - INLINE_OPTIONS or match.group('media'):
        return False
    if _is_url(path):
        return False
    if path.endswith('.css') and not 'less' in options:
        return False
    return True


def _is_tracked(match):
    """Whether the import refers to a local file that ends up in the
    output, inlined by us or not.
    """
    path = match.group('path')
    options = _import_options(match)
    if _is_url(path) or 'css' in options:
        return False
    if path.endswith('.css') and not options & set(('less', 'inline')):
        return False
    return True


def _comment_spans(text):
    return [m.span('comment') for m in COMMENT_RE.finditer(text)
            if m.group('comment')]


class LessSource(object):
    """Represents the LESS file ``filename`` and, transitively, all the
    files it pulls in via ``@import``.

    Imports are looked up relative to the importing file first, then in
    each of ``paths``. A name without an extension gets ``.less``
    appended. Imports inside comments, plain CSS imports and urls are
    ignored. Imports the engine has to handle itself, such as
    ``(reference)`` imports or those with a media query, are not
    inlined, but still count towards
    :attr:`last_modified_including_imports`. A missing ``(optional)``
    import is skipped.

    Raises ``IOError`` if the file, or any file it imports, cannot be
    read.
    """

    def __init__(self, filename, encoding='utf-8', paths=(), _chain=(),
                 _scan=True, _cache=None):
        self.filename = os.path.abspath(filename)
        self.encoding = encoding
        self.paths = list(paths)
        with open(self.filename, 'r', encoding=encoding) as f:
            self.content = f.read()
        self.last_modified = get_timestamp(self.filename)

        # Maps the import name, as written, to its LessSource.
        self.imports = {}
        self._cyclic = set()
        self._comments = _comment_spans(self.content) if _scan else []
        if _scan:
            if _cache is None:
                _cache = {}
            _cache[(self.filename, True)] = self
            self._resolve_imports(_chain + (self.filename,), _cache)

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.filename)

    def _in_comment(self, match):
        position = match.start()
        for start, end in self._comments:
            if start <= position < end:
                return True
        return False

    def _matches(self):
        for match in IMPORT_RE.finditer(self.content):
            if not self._in_comment(match):
                yield match

    def _resolve_imports(self, chain, cache):
        for match in self._matches():
            if not _is_tracked(match):
                continue
            name = match.group('path')
            if name in self.imports or name in self._cyclic:
                continue
            options = _import_options(match)
            try:
                filename = self.find_import(name)
            except IOError:
                if 'optional' in options:
                    log.debug('Optional import %s not found from %s',
                              name, self.filename)
                    continue
                raise
            if filename in chain:
                log.warning('Circular import of %s in %s, ignoring',
                            name, self.filename)
                self._cyclic.add(name)
                continue
            # Files included with (inline) are not LESS, and their
            # @imports are not followed.
            scan = not 'inline' in options
            source = cache.get((filename, scan))
            if source is None:
                source = LessSource(
                    filename, encoding=self.encoding, paths=self.paths,
                    _chain=chain, _scan=scan, _cache=cache)
                cache[(filename, scan)] = source
            self.imports[name] = source

    def find_import(self, name):
        if not os.path.splitext(name)[1]:
            name += '.less'
        directories = [os.path.dirname(self.filename)] + self.paths
        for directory in directories:
            candidate = os.path.abspath(os.path.join(directory, name))
            if os.path.isfile(candidate):
                return candidate
        raise IOError(errno.ENOENT, 'Cannot find import "%s" from %s' % (
            name, self.filename), name)

    @property
    def last_modified_including_imports(self):
        """The newest modification time across this file and all of its
        imports.
        """
        newest = self.last_modified
        seen = set()
        stack = [self]
        while stack:
            source = stack.pop()
            if id(source) in seen:
                continue
            seen.add(id(source))
            newest = max(newest, source.last_modified)
            stack.extend(source.imports.values())
        return newest

    @property
    def normalized_content(self):
        """The content with every resolvable import replaced by the
        content of the imported file. Each file is only included once,
        unless imported with the ``multiple`` option.

        Imports which are left to the engine are rewritten to point to
        the absolute path of the file they were resolved to.
        """
        return self._normalize(set([self.filename]))

    def _normalize(self, seen):
        def replace(match):
            if self._in_comment(match):
                return match.group(0)
            name = match.group('path')
            if name in self._cyclic:
                return ''
            source = self.imports.get(name)
            if source is None:
                return match.group(0)
            if not _can_inline(match):
                return _rewrite_path(match, source.filename)
            if source.filename in seen and \
                    not 'multiple' in _import_options(match):
                return ''
            seen.add(source.filename)
            return source._normalize(seen)
        return IMPORT_RE.sub(replace, self.content)


def _rewrite_path(match, filename):
    start, end = match.span('path')
    offset = match.start()
    text = match.group(0)
    return text[:start - offset] + filename.replace(os.sep, '/') + \
        text[end - offset:]
