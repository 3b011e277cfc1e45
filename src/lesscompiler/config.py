"""Settings for the compiler can be given in three places: as keyword
arguments, through a configuration mapping, or as OS environment
variables. This module implements the lookup.
"""

import os
import shlex

from lesscompiler.exceptions import ConfigurationError
from lesscompiler.locators import BundledScript, get_script


__all__ = ('option', 'parse_options', 'smartsplit', 'ConfigStorage',
           'CompilerConfiguration',)


def smartsplit(string, sep):
    """Split while allowing escaping.

    So far, this seems to do what I expect - split at the separator,
    allow escaping via \\, and allow the backslash itself to be escaped.

    One problem is that it can raise a ValueError when given a backslash
    without a character to escape. I'd really like a smart splitter
    without manually scan the string. But maybe that is exactly what should
    be done.
    """
    assert string is not None   # or shlex will read from stdin
    l = shlex.shlex(string, posix=True)
    l.whitespace += sep
    l.whitespace_split = True
    l.quotes = ''
    return list(l)


def parse_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


class option(tuple):
    """Micro option system. I want this to remain small and simple,
    which is why this class is lower-case.

    See ``parse_options()`` and ``CompilerConfiguration.options``.
    """
    def __new__(cls, initarg, configvar=None, type=None):
        if configvar is None:  # If only one argument given, it is the configvar
            configvar = initarg
            initarg = None
        return tuple.__new__(cls, (initarg, configvar, type))


def parse_options(options):
    """Parses an ``options`` dict attribute.
    The result is a dict of ``option`` tuples.
    """
    # Normalize different ways to specify the dict items:
    #    attribute: option()
    #    attribute: ('__init__ arg', 'config variable')
    #    attribute: ('config variable,')
    #    attribute: 'config variable'
    result = {}
    for internal, external in options.items():
        if not isinstance(external, option):
            if not isinstance(external, (list, tuple)):
                external = (external,)
            external = option(*external)
        result[internal] = external
    return result


class ConfigStorage(object):
    """Case-insensitive storage for configuration values.

    We don't inherit from ``dict``, it would require us to re-implement
    a whole bunch of methods, like pop() etc.
    """

    def __init__(self, values=None):
        self._dict = {}
        if values:
            self.update(values)

    def get(self, key, default=None):
        try:
            return self.__getitem__(key)
        except KeyError:
            return default

    def update(self, d):
        for key in d:
            self.__setitem__(key, d[key])

    def __contains__(self, key):
        return self._dict.__contains__(key.lower())

    def __getitem__(self, key):
        return self._dict.__getitem__(key.lower())

    def __setitem__(self, key, value):
        self._dict.__setitem__(key.lower(), value)


class CompilerConfiguration(object):
    """Holds the settings of a :class:`~lesscompiler.LessCompiler`.

    *Supported configuration options*:

    LESS_SHIM_JS (browser_shim)
        Script that provides the browser globals a LESS engine built for
        the browser expects. Defaults to the bundled ``shim.js``.

    LESS_ENGINE_JS (engine_script)
        The LESS engine itself. It has to leave a global ``less`` object
        behind. The bundled default does ``require('less')``, so under
        Node.js the ``less`` package must be installed, or be found via
        ``NODE_PATH``.

    LESS_EXTENSION_JS (extension_scripts)
        Additional scripts, loaded in order after the engine, for example
        to define custom LESS functions. In the OS environment, separate
        them with commas.

    LESS_COMPRESS (compress)
        Whether to produce whitespace-minimized CSS. Read on every call.

    LESS_ENCODING (encoding)
        Character encoding used when writing output files. The platform
        default is used if not set.

    LESS_NODE_BIN (binary)
        The Node.js executable to run the engine in. Defaults to
        ``node``, looked up on the ``PATH``.

    Script locations, as well as the binary, can no longer be changed
    once the compiler has been initialized.
    """

    options = {
        'browser_shim': 'LESS_SHIM_JS',
        'engine_script': 'LESS_ENGINE_JS',
        'extension_scripts': option('LESS_EXTENSION_JS', type=list),
        'compress': option('LESS_COMPRESS', type=bool),
        'encoding': 'LESS_ENCODING',
        'binary': 'LESS_NODE_BIN',
    }

    frozen_options = ('browser_shim', 'engine_script', 'extension_scripts',
                      'binary')

    default_browser_shim = 'shim.js'
    default_engine_script = 'less-node.js'

    def __init__(self, config=None, **kwargs):
        self._frozen = False
        self.config = ConfigStorage(config)
        self._options = parse_options(self.__class__.options)

        # Resolve options given directly. Those take precedence over
        # anything found in the config storage or OS environment.
        for attribute, (initarg, _, _) in self._options.items():
            arg = initarg if initarg is not None else attribute
            if arg in kwargs:
                setattr(self, attribute, kwargs.pop(arg))
            else:
                setattr(self, attribute, None)
        if kwargs:
            raise TypeError('got an unexpected keyword argument: %s' %
                            list(kwargs.keys())[0])
        self.setup()

    def __setattr__(self, name, value):
        if name in self.frozen_options and self.__dict__.get('_frozen'):
            raise ConfigurationError(
                'Cannot change "%s" after the compiler has been '
                'initialized' % name)
        object.__setattr__(self, name, value)

    def setup(self):
        for attribute, (_, configvar, type) in self._options.items():
            if not configvar:
                continue
            if getattr(self, attribute) is None:
                # No value given directly, specifically attempt to load
                # it from the config storage or environment.
                setattr(self, attribute,
                    self.get_config(setting=configvar, type=type))
        self.compress = parse_bool(self.compress)

    def get_config(self, setting=False, env=None, type=None):
        """Look up a value either in the config storage, or in the
        OS environment.

        You may specify different names for ``setting`` and ``env``.
        If only the former is given, the latter is considered to use
        the same name. If either argument is ``False``, the respective
        source is not used.

        Returns ``None`` if the value is not found.

        Values from the OS environment are strings; set ``type`` to
        ``list`` or ``bool`` to have them converted.
        """
        assert type in (None, list, bool), "%s not supported for type" % type

        if env is None:
            env = setting

        assert setting or env

        value = None
        if not setting is False:
            value = self.config.get(setting, None)

        if value is None and not env is False:
            value = os.environ.get(env)
            if value and type == list:
                value = smartsplit(value, ',')
            elif value is not None and type == bool:
                value = parse_bool(value)

        return value

    def freeze(self):
        self._frozen = True

    def unfreeze(self):
        self._frozen = False

    @property
    def frozen(self):
        return self._frozen

    def scripts(self):
        """Return the script locators to load, in order: browser shim,
        engine, then every extension script.
        """
        extensions = self.extension_scripts or []
        if not isinstance(extensions, (list, tuple)):
            extensions = [extensions]
        return [
            get_script(self.browser_shim or
                       BundledScript(self.default_browser_shim)),
            get_script(self.engine_script or
                       BundledScript(self.default_engine_script)),
        ] + [get_script(s) for s in extensions]
