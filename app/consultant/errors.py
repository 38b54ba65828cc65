"""Error types raised by the consultant workflow."""


class ConsultantError(Exception):
    """Base class for consultant workflow errors."""


class ConfigurationError(ConsultantError):
    """Required configuration or credentials are missing or invalid.

    Raised at startup or while building agents, never per request.
    """


class MissingOutputError(ConsultantError):
    """A handler call succeeded but returned nothing usable."""

    def __init__(self, handler: str) -> None:
        super().__init__(f"Handler '{handler}' returned no usable output")
        self.handler = handler


class WorkflowError(ConsultantError):
    """The workflow run finished without yielding a result."""
