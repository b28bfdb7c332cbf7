"""
Scripts to manage supervised programs.
"""

from .utils import DocOptArgs, entrypoint, error
from ..plumbing import defaults
from ..plumbing.supervisor import ServiceIdentity, Supervisorctl
from ..tasks import service
from ..templating import Program, render


@entrypoint
def status(ctl: Supervisorctl, identity: ServiceIdentity):
    """
    Show the state of a program, as reported by supervisord.

    Usage: {script} NAME [--numprocs=N]
    """
    state = ctl.get_state(identity)
    print(state)
    return state


@entrypoint
def start(ctl: Supervisorctl, identity: ServiceIdentity):
    """
    Start a program, unless it's already running.

    Usage: {script} NAME [--numprocs=N]
    """
    result = service.start(identity, ctl)
    print(result)
    return result


@entrypoint
def stop(ctl: Supervisorctl, identity: ServiceIdentity):
    """
    Stop a program, unless it's already stopped.

    Usage: {script} NAME [--numprocs=N]
    """
    result = service.stop(identity, ctl)
    print(result)
    return result


@entrypoint
def restart(ctl: Supervisorctl, identity: ServiceIdentity):
    """
    Restart a program.

    Usage: {script} NAME [--numprocs=N]
    """
    result = service.restart(identity, ctl)
    print(result)
    return result


@entrypoint
def enable(opts: DocOptArgs, ctl: Supervisorctl):
    """
    Write a program's configuration, and have supervisord load it.

    Usage: {script} NAME COMMAND [--numprocs=N] [--user=USER] [--directory=DIR] [--conf-dir=DIR]
    """
    try:
        program = Program(opts["NAME"], opts["COMMAND"], numprocs=int(opts["--numprocs"] or 1),
                          user=opts["--user"], directory=opts["--directory"])
        identity = program.identity
    except ValueError as ex:
        error(str(ex), exit=2)
    result = service.enable(identity, render(program), ctl,
                            opts["--conf-dir"] or defaults.CONF_DIR)
    print(result)
    return result


@entrypoint
def disable(opts: DocOptArgs, ctl: Supervisorctl, identity: ServiceIdentity):
    """
    Remove a program's configuration, and have supervisord drop it.

    Usage: {script} NAME [--numprocs=N] [--conf-dir=DIR]
    """
    result = service.disable(identity, ctl, opts["--conf-dir"] or defaults.CONF_DIR)
    print(result)
    return result
