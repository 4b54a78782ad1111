"""
Service-layer error kinds.
Every error carries a stable `code` that views and the batch coordinator
return to the client; `status_code` is the HTTP status the API maps it to.
"""
from rest_framework import status


class ServiceError(Exception):
    """Base error for all core operations. Raised before any mutation is committed."""
    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed"

    def __init__(self, detail=None, code=None, **extra):
        self.detail = detail or self.default_detail
        if code:
            self.code = code
        self.extra = extra
        super().__init__(self.detail)

    def as_dict(self):
        data = {"detail": self.detail, "code": self.code}
        data.update(self.extra)
        return data


class ValidationError(ServiceError):
    """Malformed input: bad date, non-positive amount, unknown status."""
    code = "validation_error"
    default_detail = "Invalid input"


class NotFoundError(ServiceError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class OwnershipError(ServiceError):
    """Actor does not own the target student (distinct from not-found)."""
    code = "not_your_student"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Student does not belong to this teacher"


class DateTooEarlyError(ValidationError):
    code = "date_too_early"
    default_detail = "Date is before the allowed minimum"

    def __init__(self, min_date, detail=None):
        self.min_date = min_date
        super().__init__(detail, minDate=min_date.isoformat())
