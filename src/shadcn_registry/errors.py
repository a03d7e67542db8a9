from __future__ import annotations


class RegistryError(RuntimeError):
    pass


class ValidationError(RegistryError):
    """Malformed or missing input. Raised before anything is written."""


class AlreadyExists(RegistryError):
    pass


class NotFound(RegistryError):
    pass


class CommandFailed(RegistryError):
    def __init__(self, message: str, *, exit_code: int, log: list[str] | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.log: list[str] = list(log or [])


class ServerNotReady(RegistryError):
    pass


class PromptCancelled(Exception):
    """The user aborted an interactive prompt (Ctrl-C / EOF)."""
