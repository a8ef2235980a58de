"""
Error taxonomy shared by services and routes.

Every error carries the HTTP status it maps to at the request boundary, so the
handlers registered in ``backpack.main`` can turn any of them into the uniform
``{"success": false, "error": ...}`` body.
"""


class BackpackError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# 400 - user-correctable input
class ValidationError(BackpackError):
    status_code = 400
    default_message = "Invalid request."


class InvalidPincodeFormat(ValidationError):
    default_message = "Invalid pincode format. Must be 6 digits."


class IneligiblePincode(ValidationError):
    default_message = "Invalid Bangalore pincode."

    @classmethod
    def for_ranges(cls, ranges_text: str) -> "IneligiblePincode":
        return cls(f"{cls.default_message} Must be in range {ranges_text}.")


# Referenced entity absent
class NotFoundError(BackpackError):
    status_code = 404
    default_message = "Not found."


class InvalidCode(NotFoundError):
    status_code = 400
    default_message = "Invalid code"


class VisitorNotFound(NotFoundError):
    # verify-action reports every failure as a server error
    status_code = 500
    default_message = "Visitor not found."


# Uniqueness / state conflicts
class ConflictError(BackpackError):
    status_code = 500


class DuplicateCodeError(ConflictError):
    default_message = "Referral code already exists."


class TransitionNotAllowed(ConflictError):
    status_code = 409
    default_message = "Visitor has already been reviewed."


class StorageError(BackpackError):
    default_message = "DB Error"


# File receive failures
class UploadError(BackpackError):
    status_code = 400
    default_message = "Upload failed."


class UploadTimeout(UploadError):
    default_message = "Upload failed: timed out receiving file."
