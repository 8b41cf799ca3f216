# /checkin/workflows/errors.py

from typing import Optional


class FlowError(Exception):
    """Base class for check-in flow errors."""


class FlowValidationError(FlowError):
    """Raised when a flow definition breaks an authoring rule."""

    def __init__(self, error_code: str, message: Optional[str] = None):
        self.error_code = error_code
        self.message = message or error_code
        super().__init__(self.message)


class SessionStateError(FlowError):
    """Raised when a session method is called in a state that does not allow it."""


class FlowNotFoundError(FlowError):
    """Raised when the flow store has no definition with the requested id."""

    def __init__(self, flow_id: str):
        self.flow_id = flow_id
        super().__init__(f"Flow '{flow_id}' not found")


class SessionNotFoundError(FlowError):
    """Raised when no live session has the requested id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' not found")
