"""Errors raised by the approval workflow.

Each carries the HTTP status the API layer answers with, so routes never
translate them by hand.
"""

from fastapi import status


class WorkflowError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, current_status: str) -> None:
        super().__init__(f"Request is not in PENDING status. Current status: {current_status}")
        self.current_status = current_status


class UnauthorizedActionError(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, user_id: int, action: str) -> None:
        super().__init__(f"User with ID {user_id} is not authorized to {action} this request")
        self.user_id = user_id
        self.action = action
