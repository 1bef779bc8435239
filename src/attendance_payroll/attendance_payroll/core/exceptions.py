class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the stable error kind returned by the API, ``http_status`` the
    status code the web layer answers with.
    """

    code = "domain_error"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class RecordNotFound(DomainError):
    code = "record_not_found"
    http_status = 404


class AlreadyClockedIn(DomainError):
    """The employee already has an attendance session for that day."""

    code = "already_clocked_in"
    http_status = 409


class NotClockedIn(DomainError):
    """Clock-out requested without an open clock-in for that day."""

    code = "not_clocked_in"
    http_status = 409


class DuplicateRecord(DomainError):
    """A unique key (employee/day or employee/pay period) is already taken."""

    code = "duplicate_record"
    http_status = 409


class ImmutableRecord(DomainError):
    """A paid payroll record can only have its payment date changed."""

    code = "immutable_record"
    http_status = 409


class InvalidStatusTransition(DomainError):
    code = "invalid_status_transition"
    http_status = 409


class InvalidSalaryConfiguration(DomainError):
    """The employee lacks the rate field required by its salary type."""

    code = "invalid_salary_configuration"
    http_status = 422
