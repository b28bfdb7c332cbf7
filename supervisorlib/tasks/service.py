"""
Lifecycle of supervised programs: enable, disable, start, stop and restart.

Every action asks supervisord for the program's current state, looks up what to do in a fixed
decision table, and only then runs a control command or rewrites configuration.
"""

from enum import Enum
import logging
from typing import Callable, Dict, NamedTuple, Optional

from ..plumbing import defaults, files
from ..plumbing.common import Collect, Result, State
from ..plumbing.supervisor import (EXPECTED_OUTPUT, PreconditionFailure, RUNNING, ServiceIdentity,
                                   ServiceState, STOPPED, Supervisorctl, UNAVAILABLE)


LOG = logging.getLogger(__name__)


class Action(Enum):
    """
    Lifecycle actions that can be requested for a program.
    """

    enable = "enable"
    disable = "disable"
    start = "start"
    stop = "stop"
    restart = "restart"


class Outcome(Enum):
    """
    What an action amounts to, given the program's current state.
    """

    noop = 0
    """
    Already in the requested state.
    """
    fatal = 1
    """
    The action can't apply to a program supervisord doesn't know about.
    """
    command = 2
    """
    Send the action to supervisorctl and verify its output.
    """
    procedure = 3
    """
    Write or remove configuration, then have supervisord reread it.
    """


class Decision(NamedTuple):
    outcome: Outcome
    action: Action

    @property
    def pattern(self) -> Optional[str]:
        """
        Expected output of the control command, if one needs to be sent.
        """
        if self.outcome != Outcome.command:
            return None
        return EXPECTED_OUTPUT[self.action.value]


# State in which each control action has nothing left to do.
_SATISFIED: Dict[Action, Optional[ServiceState]] = {
    Action.start: RUNNING,
    Action.stop: STOPPED,
    Action.restart: None,
}


def decide(state: ServiceState, action: Action) -> Decision:
    """
    Map a program's current state and a requested action to the work needed.

    This doesn't talk to supervisord, so can be checked for every combination directly.
    """
    if action == Action.enable:
        return Decision(Outcome.procedure, action)
    elif action == Action.disable:
        if state == UNAVAILABLE:
            return Decision(Outcome.noop, action)
        return Decision(Outcome.procedure, action)
    elif state == UNAVAILABLE:
        return Decision(Outcome.fatal, action)
    elif state == _SATISFIED[action]:
        return Decision(Outcome.noop, action)
    else:
        return Decision(Outcome.command, action)


class UpdateTrigger:
    """
    Deferred `supervisorctl update`, run at most once however many times it's notified.
    """

    def __init__(self, ctl: Supervisorctl):
        self.ctl = ctl
        self.done = False

    def run(self) -> Result[None]:
        if self.done:
            return Result(State.unchanged, caller=self.run)
        result = self.ctl.update()
        LOG.debug("Reread supervisord configuration: %r", result.output)
        self.done = True
        return Result(State.success, caller=self.run)


def _control(identity: ServiceIdentity, action: Action, ctl: Optional[Supervisorctl]) -> State:
    ctl = ctl or Supervisorctl()
    state = ctl.get_state(identity)
    decision = decide(state, action)
    if decision.outcome == Outcome.fatal:
        raise PreconditionFailure(action.value, identity.name)
    elif decision.outcome == Outcome.noop:
        LOG.debug("Supervisor service %s is already %s", identity.name, state.lower())
        return State.unchanged
    LOG.info("Running %s on supervisor service %s (%s)", action.value, identity.name, state)
    result = ctl.execute(action.value, identity)
    ctl.verify(result, decision.pattern, identity)
    return State.success


def start(identity: ServiceIdentity, ctl: Optional[Supervisorctl] = None) -> Result[None]:
    """
    Start a program that isn't running.
    """
    return Result(_control(identity, Action.start, ctl))


def stop(identity: ServiceIdentity, ctl: Optional[Supervisorctl] = None) -> Result[None]:
    """
    Stop a program that isn't stopped.
    """
    return Result(_control(identity, Action.stop, ctl))


def restart(identity: ServiceIdentity, ctl: Optional[Supervisorctl] = None) -> Result[None]:
    """
    Restart a program, whatever state it's in.
    """
    return Result(_control(identity, Action.restart, ctl))


@Result.collect
def enable(identity: ServiceIdentity, config: str, ctl: Optional[Supervisorctl] = None,
           conf_dir: str = defaults.CONF_DIR) -> Collect[None]:
    """
    Install a program's rendered configuration, and have supervisord pick it up.

    supervisord is asked to reread its configuration on every call, as the file may have been
    written while supervisord wasn't running.
    """
    trigger = UpdateTrigger(ctl or Supervisorctl())
    LOG.info("Enabling supervisor service %s", identity.name)
    yield files.write_file(files.conf_path(identity.name, conf_dir), config)
    yield trigger.run()


@Result.collect
def disable(identity: ServiceIdentity, ctl: Optional[Supervisorctl] = None,
            conf_dir: str = defaults.CONF_DIR) -> Collect[None]:
    """
    Remove a program's configuration, and have supervisord drop it.
    """
    ctl = ctl or Supervisorctl()
    decision = decide(ctl.get_state(identity), Action.disable)
    if decision.outcome == Outcome.noop:
        LOG.info("Supervisor service %s is already disabled", identity.name)
        return
    trigger = UpdateTrigger(ctl)
    LOG.info("Disabling supervisor service %s", identity.name)
    yield files.remove_file(files.conf_path(identity.name, conf_dir))
    yield trigger.run()


def manage(identity: ServiceIdentity, action: str, config: Optional[str] = None,
           ctl: Optional[Supervisorctl] = None, conf_dir: str = defaults.CONF_DIR) -> Result[None]:
    """
    Apply a named action to a program, as requested by an orchestration layer.

    `config` is the rendered program configuration, and is required to enable.
    """
    try:
        act = Action(action)
    except ValueError:
        raise ValueError("Unknown action {!r}, expected one of: {}"
                         .format(action, ", ".join(a.value for a in Action))) from None
    if act == Action.enable:
        if config is None:
            raise ValueError("Supervisor service {} needs a configuration to enable"
                             .format(identity.name))
        return enable(identity, config, ctl, conf_dir)
    elif act == Action.disable:
        return disable(identity, ctl, conf_dir)
    actions: Dict[Action, Callable[..., Result[None]]] = {
        Action.start: start, Action.stop: stop, Action.restart: restart}
    return actions[act](identity, ctl)
