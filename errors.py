"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Error taxonomy shared by the workflow, the auth layer and the HTTP handlers.
Each error knows the HTTP status it maps to.
"""


class SRMSError(Exception):
    status_code = 500
    error = "server_error"

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__ or self.error)
        self.message = message or self.__class__.__doc__ or self.error

    def to_dict(self):
        return {"success": False, "error": self.error, "message": self.message}


class ValidationError(SRMSError):
    """Invalid request data"""
    status_code = 400
    error = "validation_error"


class AuthError(SRMSError):
    """Authentication required"""
    status_code = 401
    error = "auth_error"


class NotFoundError(SRMSError):
    """Not found"""
    status_code = 404
    error = "not_found"


class InvalidTransitionError(SRMSError):
    """Order cannot move to the requested status"""
    status_code = 422
    error = "invalid_transition"


class NotEligibleError(SRMSError):
    """Order is not eligible for this action"""
    status_code = 422
    error = "not_eligible"


class DuplicateError(SRMSError):
    """Record already exists"""
    status_code = 422
    error = "duplicate"


class StorageError(SRMSError):
    """Internal storage error"""
    status_code = 500
    error = "storage_error"
