"""Exception types for hostfacts.

None of these escape the runtime bridge entry points; they are raised by
the components underneath and converted to a boolean outcome plus a log
line at that boundary.
"""


class HostFactsError(Exception):
    """Base exception for hostfacts errors."""

    pass


class RuntimeUnavailableError(HostFactsError):
    """The embedded runtime could not be started."""

    pass


class RuntimeStateError(HostFactsError):
    """The runtime was used outside its initialize/uninitialize lifecycle."""

    pass


class RuntimeEvalError(HostFactsError):
    """Code executed inside the runtime raised an exception."""

    def __init__(self, message: str, stack_trace: str | None = None) -> None:
        super().__init__(message)
        self.stack_trace = stack_trace

    def __str__(self) -> str:
        message = super().__str__()
        if self.stack_trace:
            return f"{message}\n{self.stack_trace}"
        return message


class FactDefinitionError(HostFactsError):
    """A custom fact was registered with an invalid definition."""

    pass
