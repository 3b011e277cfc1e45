import os
import shutil
import tempfile


__all__ = ('get_timestamp', 'write_file_atomic',)


def get_timestamp(filename):
    """Modification time of ``filename``. Raises ``OSError`` if it does
    not exist.
    """
    return os.stat(filename).st_mtime


def write_file_atomic(filename, data, encoding):
    """Write ``data`` to ``filename``, replacing whatever is there.

    The data goes to a temporary file in the same directory first, which
    is then renamed over the target, so readers never see a partial file.
    """
    directory, basename = os.path.split(os.path.abspath(filename))
    fd, temp = tempfile.mkstemp(
        dir=directory, prefix='.%s.' % basename, suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding=encoding, newline='') as f:
            f.write(data)
        # mkstemp() creates files only the owner can read.
        if os.path.exists(filename):
            shutil.copymode(filename, temp)
        else:
            os.chmod(temp, 0o644)
        os.replace(temp, filename)
    except BaseException:
        if os.path.exists(temp):
            os.unlink(temp)
        raise
