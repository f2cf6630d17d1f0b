from fastapi import status
from config import INCORRECT_PASSWORD


class BoardError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Board operation failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(BoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Missing required fields"


class NotFoundError(BoardError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class AuthorizationError(BoardError):
    status_code = status.HTTP_403_FORBIDDEN
    message = INCORRECT_PASSWORD


class StorageError(BoardError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Storage unavailable"

