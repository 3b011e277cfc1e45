"""Updaters decide whether an output file needs to be rebuilt.

The default, :class:`TimestampUpdater`, considers the output up to date
only if it is strictly newer than the source and every file the source
imports, directly or indirectly. The import graph itself is walked by
:class:`~lesscompiler.source.LessSource`; the updater only looks at the
aggregate timestamp it reports.
"""

from lesscompiler.utils import get_timestamp


__all__ = ('get_updater', 'BaseUpdater', 'TimestampUpdater',
           'AlwaysUpdater',)


class UpdaterRegistry(type):
    """Keeps track of every updater class that defines an ``id``."""

    UPDATERS = {}

    def __new__(cls, name, bases, attrs):
        new_klass = type.__new__(cls, name, bases, attrs)
        if 'id' in attrs:
            cls.UPDATERS[attrs['id']] = new_klass
        return new_klass

    def resolve(cls, thing):
        """Resolve ``thing`` to an updater instance. Accepts an
        instance, an updater class, or the id of a registered one.
        """
        if hasattr(thing, 'needs_rebuild'):
            if isinstance(thing, type):
                return thing()
            return thing
        if not thing:
            return None
        try:
            return cls.UPDATERS[thing]()
        except (KeyError, TypeError):
            raise ValueError('Updater "%s" is not valid.' % (thing,))


class BaseUpdater(metaclass=UpdaterRegistry):
    """Base updater class.

    Child classes that define an ``id`` attribute are accessible via their
    string id.

    A single instance can be used with any number of compilers.
    """

    def needs_rebuild(self, source, output):
        """Returns ``True`` if ``output`` needs to be rebuilt from
        ``source``, ``False`` otherwise.
        """
        raise NotImplementedError()

    def build_done(self, source, output):
        """This will be called once ``output`` has been successfully
        written.
        """


get_updater = BaseUpdater.resolve


class TimestampUpdater(BaseUpdater):

    id = 'timestamp'

    def needs_rebuild(self, source, output):
        try:
            o_modified = get_timestamp(output)
        except OSError:
            # If the output file does not exist, we'll have to rebuild
            return True
        return o_modified < source.last_modified_including_imports


class AlwaysUpdater(BaseUpdater):

    id = 'always'

    def needs_rebuild(self, source, output):
        return True
