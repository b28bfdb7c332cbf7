"""
Program configuration files in supervisord's include directory.
"""

import logging
import os
import os.path
import tempfile

from .common import Result, State
from . import defaults


LOG = logging.getLogger(__name__)


def conf_path(name: str, conf_dir: str = defaults.CONF_DIR) -> str:
    """
    Location of the configuration file for a named program.
    """
    return os.path.join(conf_dir, "{}.conf".format(name))


def _read(path: str):
    try:
        with open(path) as f:
            return f.read()
    except FileNotFoundError:
        return None


def write_file(path: str, content: str, mode: int = defaults.CONF_MODE) -> Result[None]:
    """
    Write a file if its content or permissions differ.

    The new content is written to a temporary file and moved into place, so supervisord never
    reads a partial configuration.
    """
    current = _read(path)
    if current == content:
        if os.stat(path).st_mode & 0o7777 == mode:
            return Result(State.unchanged)
        os.chmod(path, mode)
        LOG.debug("Updated file mode: %r %o", path, mode)
        return Result(State.success)
    fd, tmp = tempfile.mkstemp(dir=os.path.dirname(path) or ".", prefix=".tmp-")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise
    if current is None:
        LOG.debug("Created file: %r", path)
        return Result(State.created)
    LOG.debug("Replaced file: %r", path)
    return Result(State.success)


def remove_file(path: str) -> Result[None]:
    """
    Delete a file, if it exists.
    """
    try:
        os.unlink(path)
    except FileNotFoundError:
        return Result(State.unchanged)
    LOG.debug("Deleted file: %r", path)
    return Result(State.success)
