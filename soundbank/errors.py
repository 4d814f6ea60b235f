"""Error taxonomy: which failures abort a track and which are only reported."""


class SoundbankError(Exception):
    """Base class for failures that abort one unit of work."""


class SourceError(SoundbankError):
    """The generation service failed (HTTP error, timeout, empty body)."""


class ToolError(SoundbankError):
    """An audio tool invocation exited abnormally or produced no output."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stderr:
            tail = self.stderr.strip().splitlines()[-3:]
            msg += " | " + " / ".join(tail)
        return msg


class AssemblyError(SoundbankError):
    """Segments violate a precondition of the selected merge strategy."""


class PipelineCancelled(SoundbankError):
    """A track pipeline was stopped between steps."""


class ContinuityWarning(UserWarning):
    """An assembled track contains an interior silence gap."""
