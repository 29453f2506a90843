"""Typed failures raised by the workflow services.

The HTTP layer maps each class to a status code through ``status_code``;
services never return ``None`` to signal one of these conditions.
"""

class DomainError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class NotFound(DomainError):
    status_code = 404
    kind = "not_found"

    def __init__(self, entity: str, message: str | None = None):
        super().__init__(message or f"{entity} not found")
        self.entity = entity

class Unauthorized(DomainError):
    status_code = 401
    kind = "unauthorized"

    def __init__(self, message: str = "You are not authorized to access this case."):
        super().__init__(message)

class Conflict(DomainError):
    status_code = 409
    kind = "conflict"

class InvalidWorkflowStep(DomainError):
    status_code = 400
    kind = "invalid_workflow_step"

    def __init__(self, operation: str, current_step: str | None, allowed: tuple[str, ...] | frozenset):
        super().__init__(
            f"Invalid request: case must be in one of {sorted(allowed)} to {operation}. Current step: {current_step}"
        )
        self.operation = operation
        self.current_step = current_step

class ValidationFailed(DomainError):
    status_code = 400
    kind = "validation_failed"

    def __init__(self, message: str = "Validation failed", errors: list | dict | None = None):
        super().__init__(message)
        self.errors = errors

class InvalidState(DomainError):
    kind = "invalid_state"

class ConsistencyError(DomainError):
    """A row disappeared between our own write and the re-read that follows it."""
    kind = "consistency_error"
