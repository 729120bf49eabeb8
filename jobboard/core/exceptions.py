"""
Exception hierarchy for the job board
Each exception maps onto one HTTP status in main.py
"""
from typing import List, Optional


class JobBoardException(Exception):
    """Base exception for all domain errors"""

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        self.message = message
        self.errors = errors
        super().__init__(message)


class ValidationException(JobBoardException):
    """Malformed or out-of-bounds input"""
    pass


class AuthenticationException(JobBoardException):
    """No identity, or the identity could not be verified"""

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message)


class AuthorizationException(JobBoardException):
    """Valid identity without the rights for this operation"""
    pass


class ResourceNotFoundException(JobBoardException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier: str = None):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found")


class ConflictException(JobBoardException):
    """Business rule rejected the request (duplicate, closed job, ...)"""
    pass


class UnexpectedException(JobBoardException):
    """Storage or infrastructure failure; details stay server-side"""

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
