"""
Rendering of `[program:x]` sections for supervisord's include directory.

Templates placed inside the `templates` directory of this package receive a single `program`
variable.  The following Jinja2 filters are available to templates:

- `ini` to format a Python value as a supervisord option value
- `environment` to format a mapping as a `KEY="value",...` list
"""

import logging
import os.path
from typing import Any, Mapping, NamedTuple, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .plumbing.supervisor import ServiceIdentity


LOG = logging.getLogger(__name__)


def _ini(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    else:
        return str(value)


def _environment(env: Mapping[str, str]) -> str:
    return ",".join('{}="{}"'.format(key, str(value).replace('"', '\\"'))
                    for key, value in sorted(env.items()))


ENV = Environment(loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
                  trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True,
                  undefined=StrictUndefined)

ENV.filters.update({"ini": _ini,
                    "environment": _environment})


class Program(NamedTuple):
    """
    Options of a supervisord program, as written to its configuration section.

    Anything left as `None` is omitted, leaving supervisord's own default in place.
    """

    name: str
    command: str
    numprocs: int = 1
    numprocs_start: Optional[int] = None
    process_name: Optional[str] = None
    priority: Optional[int] = None
    autostart: Optional[bool] = None
    autorestart: Optional[str] = None
    startsecs: Optional[int] = None
    startretries: Optional[int] = None
    exitcodes: Optional[Sequence[int]] = None
    stopsignal: Optional[str] = None
    stopwaitsecs: Optional[int] = None
    user: Optional[str] = None
    redirect_stderr: Optional[bool] = None
    stdout_logfile: Optional[str] = None
    stderr_logfile: Optional[str] = None
    environment: Optional[Mapping[str, str]] = None
    directory: Optional[str] = None
    umask: Optional[str] = None
    serverurl: Optional[str] = None

    @property
    def identity(self) -> ServiceIdentity:
        return ServiceIdentity.new(self.name, self.numprocs)

    @property
    def options(self) -> Mapping[str, Any]:
        """
        Options to write, in declaration order, skipping unset ones.
        """
        opts = {}
        for key in self._fields[1:]:
            value = getattr(self, key)
            if key == "process_name" and value is None and self.numprocs > 1:
                # supervisord refuses numprocs > 1 without the process number in the name.
                value = "%(program_name)s_%(process_num)02d"
            if key == "numprocs" and value == 1:
                continue
            if value is not None:
                opts[key] = value
        return opts


def render(program: Program, template: str = "program.conf.j2") -> str:
    """
    Render a program's configuration section with Jinja.
    """
    LOG.debug("Rendering %r for program %r", template, program.name)
    return ENV.get_template(template).render(program=program)
