"""
Control of programs managed by a running supervisord, via `supervisorctl`.

supervisorctl reports everything as free text, so all of the output shapes this module
understands are defined together at the top: if a supervisor release changes its wording, only
these constants should need updating.
"""

from collections import deque
import logging
import re
from typing import Dict, NamedTuple, NewType, Optional

from .common import command
from . import defaults


LOG = logging.getLogger(__name__)

NO_SUCH_PROCESS = "No such process {name}"
"""
Sentinel in `status` output for a program supervisord doesn't know about.
"""

NO_SUCH_GROUP = "{name}: ERROR (no such group)"
"""
Sentinel in `status {name}:*` output for a process group supervisord doesn't know about.
"""

STATUS_LINE = r"^{name}(?::\S+)?\s*([A-Z]+)(.*)"
"""
One line of `status` output, e.g. `web RUNNING pid 123, uptime 0:01:00`.  Members of a process
group are listed as `web:web_00`.
"""

EXPECTED_OUTPUT: Dict[str, str] = {
    "start": r"(?:^|\s){name}(?::\S+)?: started\Z",
    "stop": r"(?:^|\s){name}(?::\S+)?: stopped\Z",
    # Matched at the start of a line, not the end of the output: restart reports the stop first.
    "restart": r"^{name}(?::\S+)?: started",
}
"""
Output of a successful control command, by action, matched with `re.MULTILINE`.  Process groups
answer with one line per member, e.g. `web:web_00: started`.
"""


ServiceState = NewType("ServiceState", str)
"""
Process status as reported by supervisord (`RUNNING`, `STOPPED`, `FATAL` etc.), or `UNAVAILABLE`.
"""

UNAVAILABLE = ServiceState("UNAVAILABLE")
RUNNING = ServiceState("RUNNING")
STOPPED = ServiceState("STOPPED")

_PAST = {"start": "started", "stop": "stopped", "restart": "restarted"}


class SupervisorError(Exception):
    """
    Base class for failures reported while driving supervisord.
    """


class PreconditionFailure(SupervisorError):
    """
    An action was requested against a program that supervisord doesn't know about.
    """

    def __init__(self, action: str, name: str):
        super().__init__("Supervisor service {} cannot be {} because it does not exist"
                         .format(name, _PAST.get(action, action)))
        self.action = action
        self.name = name


class ProtocolMismatch(SupervisorError):
    """
    `supervisorctl status` produced output in a shape that can't be interpreted.
    """

    def __init__(self, command: str, output: str):
        super().__init__("The supervisor service is not running as expected.  "
                         "The command {!r} output:\n----\n{}\n----".format(command, output))
        self.command = command
        self.output = output


class CommandVerificationFailure(SupervisorError):
    """
    A control command ran, but its output didn't confirm the requested change.
    """

    def __init__(self, command: str, output: str, log_tail: Optional[str] = None):
        msg = "Supervisor command had unexpected output:\n$ {}\n{}\n--".format(command, output)
        if log_tail:
            msg = "{}\n{}".format(msg, log_tail)
        super().__init__(msg)
        self.command = command
        self.output = output
        self.log_tail = log_tail


class ServiceIdentity(NamedTuple):
    """
    A supervisord program, and how many processes it runs.
    """

    name: str
    numprocs: int = 1

    @classmethod
    def new(cls, name: str, numprocs: int = 1) -> "ServiceIdentity":
        if not name:
            raise ValueError("Program name must not be empty")
        if int(numprocs) < 1:
            raise ValueError("Program {!r} needs at least one process, got {}"
                             .format(name, numprocs))
        return cls(name, int(numprocs))

    @property
    def addressed_name(self) -> str:
        """
        Name to pass to supervisorctl: process groups are addressed with a wildcard.
        """
        return "{}:*".format(self.name) if self.numprocs > 1 else self.name


class ControlCommandResult(NamedTuple):
    """
    Command line sent to supervisorctl, and its standard output without trailing whitespace.
    """

    command: str
    output: str


class Supervisorctl:
    """
    Wrapper around the `supervisorctl` command line interface.

    Nothing is cached between calls: supervisord is the only record of program state.
    """

    def __init__(self, binary: str = defaults.SUPERVISORCTL,
                 conffile: Optional[str] = defaults.CONF_FILE,
                 logfile: Optional[str] = defaults.LOG_FILE):
        self.binary = binary
        self.conffile = conffile
        self.logfile = logfile

    def __repr__(self):
        return "<{}: {!r}>".format(self.__class__.__name__, self.binary)

    def _run(self, *args: str) -> ControlCommandResult:
        cmd = [self.binary]
        if self.conffile:
            cmd += ["-c", self.conffile]
        cmd += args
        # Exit status is meaningless here: `status` exits non-zero for anything not running.
        proc = command(cmd, output=True, check=False)
        return ControlCommandResult(" ".join(cmd), (proc.stdout or "").rstrip())

    def get_state(self, identity: ServiceIdentity) -> ServiceState:
        """
        Ask supervisord for the current status of a program.
        """
        result = self._run("status", identity.addressed_name)
        if NO_SUCH_PROCESS.format(name=identity.name) in result.output:
            return UNAVAILABLE
        if identity.numprocs > 1 and NO_SUCH_GROUP.format(name=identity.name) in result.output:
            return UNAVAILABLE
        match = re.search(STATUS_LINE.format(name=re.escape(identity.name)), result.output,
                          re.MULTILINE)
        if not match:
            raise ProtocolMismatch(result.command, result.output)
        state = ServiceState(match.group(1))
        LOG.debug("Status of %r: %s", identity.name, state)
        return state

    def execute(self, action: str, identity: ServiceIdentity) -> ControlCommandResult:
        """
        Run a control command against a program, without checking what it says.
        """
        return self._run(action, identity.addressed_name)

    def update(self) -> ControlCommandResult:
        """
        Make supervisord reread its configuration, adding and removing programs as needed.
        """
        return self._run("update")

    def log_tail(self, lines: int = defaults.LOG_TAIL_LINES) -> Optional[str]:
        """
        Fetch the end of supervisord's own log file, if one is configured and readable.
        """
        if not self.logfile:
            LOG.info("Set a supervisord log file to see its tail when a command fails")
            return None
        try:
            with open(self.logfile) as log:
                tail = "".join(deque(log, maxlen=lines))
        except (OSError, UnicodeDecodeError) as ex:
            LOG.info("Unable to read log file %r: %s", self.logfile, ex)
            return None
        rule = "-" * 60
        LOG.debug("Tail of log file %r:\n%s\n%s%s", self.logfile, rule, tail, rule)
        return "Tail of log file {}:\n{}\n{}{}".format(self.logfile, rule, tail, rule)

    def verify(self, result: ControlCommandResult, expected: str,
               identity: ServiceIdentity) -> None:
        """
        Check a control command's output against its expected success message, one of the
        `EXPECTED_OUTPUT` templates.
        """
        pattern = expected.format(name=re.escape(identity.name))
        if re.search(pattern, result.output, re.MULTILINE):
            return
        log_tail = self.log_tail() if LOG.isEnabledFor(logging.DEBUG) else None
        raise CommandVerificationFailure(result.command, result.output, log_tail)
