"""
Helpers for converting methods into scripts, and filling in arguments with program identities.
"""

from functools import wraps
from inspect import cleandoc, signature
import logging
import sys
from typing import Any, Callable, cast, Dict, List, Optional, Union

from docopt import docopt

from ..plumbing.supervisor import ServiceIdentity, Supervisorctl, SupervisorError


DocOptArgs = Dict[str, Union[bool, str, List[str], None]]


ENTRYPOINTS: List[str] = []


def entrypoint(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to make an entrypoint out of a generic function.

    This uses `docopt` to parse arguments according to the method docstring, and will be formatted
    with `{script}` set to the script name.  At minimum, it should contain `Usage: {script}`.

    Functions may optionally accept arguments, but they must be annotated with a recognised type in
    order to be filled in:

    - `DocOptArgs` (a `dict` of input parameters parsed from the usage line)
    - `Supervisorctl` (a control client using the default paths)
    - `ServiceIdentity` (built from `NAME` and `--numprocs`, which the usage line must declare)

    An example function:

        @entrypoint
        def start(ctl: Supervisorctl, identity: ServiceIdentity):
            \"""
            Start a program.

            Usage: {script} NAME [--numprocs=N]
            \"""

    Any `SupervisorError` raised is printed, and the script exits with status 1.
    """
    label = "supervisorlib-{}-{}".format(fn.__module__.rsplit(".", 1)[-1],
                                         fn.__qualname__).replace("_", "-")

    @wraps(fn)
    def wrap(opts: Optional[DocOptArgs] = None):
        extra: Dict[str, Any] = {}
        script = "{} [--debug]".format(label)
        if opts is None:
            doc = cleandoc(fn.__doc__.format(script=script))
            opts = docopt(doc)
        if opts.pop("--debug", False):
            logging.basicConfig(level=logging.DEBUG)
        for param in signature(fn).parameters.values():
            cls = param.annotation
            if cls is DocOptArgs:
                extra[param.name] = opts
            elif cls is Supervisorctl:
                extra[param.name] = Supervisorctl()
            elif cls is ServiceIdentity:
                try:
                    extra[param.name] = ServiceIdentity.new(cast(str, opts["NAME"]),
                                                            int(opts.get("--numprocs") or 1))
                except ValueError as ex:
                    error(str(ex), exit=2)
            else:
                raise RuntimeError("Bad parameter {!r} type {!r}".format(param.name, cls))
        try:
            return fn(**extra)
        except SupervisorError as ex:
            error(str(ex), exit=1)
    wrap.__doc__ = wrap.__doc__.format(script=label)
    # Create a console script line for setup.
    target = "{}:{}".format(fn.__module__, fn.__qualname__)
    ENTRYPOINTS.append("{}={}".format(label, target))
    return wrap


def error(msg: Optional[str] = None, *, exit: Optional[int] = None, colour: Optional[str] = None):
    """
    Print an error message and/or exit.
    """
    if msg:
        colour = colour or ("1" if exit else "3")
        print("\033[9{}m{}\033[0m".format(colour, msg), file=sys.stderr)
    if exit is not None:
        sys.exit(exit)
