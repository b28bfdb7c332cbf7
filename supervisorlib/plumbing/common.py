"""
Shared helper methods and base classes.
"""

from enum import Enum
from functools import wraps
import inspect
import logging
import subprocess
from typing import Any, Callable, Generator, Generic, Iterable, List, Optional, TypeVar, Union


LOG = logging.getLogger(__name__)

T = TypeVar("T")

Collect = Generator["Result[Any]", None, T]
"""
Generic type for the return value of functions using `Result.collect`.
"""


class Unset:
    """
    Constructor of generic default values for optional but nullable parameters.
    """

    def __repr__(self):
        return "UNSET"


UNSET = Unset()
"""
Global generic default value.
"""


class State(Enum):
    """
    Enumeration used by `Result` to declare whether anything was done to a program.
    """

    unchanged = 0
    """
    No action required, the program is already in the requested state.
    """
    success = 1
    """
    A control command or procedure ran and its outcome was verified.
    """
    created = 2
    """
    A configuration file was written where none existed before.
    """

    def __bool__(self):
        return bool(self.value)


class Result(Generic[T]):
    """
    State and optional accompanying value from a unit of work.

    Plumbing returns a result directly:

        def start_program():
            # Run supervisorctl and check its output.
            return Result(State.success)

    Tasks that chain several actions use `Result.collect`, and report a change if any part did.

    Results are falsy when nothing changed, and print as a tree of their parts:

        supervisorlib.tasks.service:enable: created
            supervisorlib.plumbing.files:write_file: created
            supervisorlib.tasks.service:UpdateTrigger.run: success
    """

    @classmethod
    def collect(cls, fn: Callable[..., Collect[T]]) -> Callable[..., "Result[T]"]:
        """
        Decorator: build a `Result` from the sub-results yielded by a generator.

            @Result.collect
            def enable(identity) -> Collect[None]:
                res_file = yield from files.write_file(path, config)
                yield trigger.run()

        The generator's return value becomes the value of the outer result.
        """
        @wraps(fn)
        def inner(*args: Any, **kwargs: Any) -> Result[T]:
            parts: List[Result[Any]] = []
            gen = fn(*args, **kwargs)
            while True:
                try:
                    parts.append(next(gen))
                except StopIteration as ex:
                    return cls(None, ex.value, parts, fn)
        return inner

    def __init__(self, state: Optional[State] = None, value: Union[T, Unset] = UNSET,
                 parts: Iterable["Result[Any]"] = (), caller: Optional[Callable[..., Any]] = None):
        self._state = state
        self._value = value
        self.parts = tuple(parts)
        self.caller = "<unknown>"
        # Name the function that built this result, e.g. `module.sub:Class.method`.
        name = None
        if not caller:
            frame = inspect.currentframe()
            try:
                name = frame.f_back.f_code.co_name
                caller = frame.f_back.f_globals[name]
            except (AttributeError, KeyError):
                pass
        if caller:
            self.caller = "{}:{}".format(caller.__module__, caller.__qualname__)
        elif name:
            self.caller = name

    @property
    def state(self) -> State:
        """
        Set explicitly, otherwise the strongest change among `parts`, or `State.unchanged`.
        """
        if self._state:
            return self._state
        elif State.created in (part.state for part in self.parts):
            return State.created
        elif any(self.parts):
            return State.success
        else:
            return State.unchanged

    @state.setter
    def state(self, state: State) -> None:
        self._state = state

    @property
    def value(self) -> T:
        """
        Value produced by the unit of work; raises `ValueError` if none was set.
        """
        if isinstance(self._value, Unset):
            raise ValueError("No value set")
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._value = value

    def __bool__(self) -> bool:
        return bool(self.state)

    def __iter__(self) -> Generator["Result[T]", None, "Result[T]"]:
        # Lets `yield from` hand back the result itself inside `Result.collect()`.
        yield self
        return self

    def __repr__(self) -> str:
        params = [str(self.state)]
        if not isinstance(self._value, Unset):
            params.append(repr(self._value))
        if self.parts:
            params.append("<{} parts>".format(len(self.parts)))
        return "{}({})".format(self.__class__.__name__, ", ".join(params))

    def __str__(self) -> str:
        tree = "{}: {}".format(self.caller, self.state.name)
        if not isinstance(self._value, (Unset, type(None))):
            tree = "{} {!r}".format(tree, self._value)
        for result in self.parts:
            tree += "\n    {}".format(str(result).replace("\n", "\n    "))
        return tree


def command(args: List[str], output: bool = False,
            check: bool = True) -> "subprocess.CompletedProcess[str]":
    """
    Create a subprocess to execute an external command.

    With `output`, standard output is captured as text.  With `check` disabled, a non-zero exit
    status is returned to the caller rather than raised as `CalledProcessError`.  A missing
    executable raises `FileNotFoundError` either way.
    """
    LOG.debug("Exec: %r", args)
    proc = subprocess.run(args, stdout=subprocess.PIPE if output else None,
                          universal_newlines=True, check=check)
    if proc.returncode:
        LOG.debug("Exit status %d: %r", proc.returncode, args)
    return proc
