class POSAnalyticsError(Exception):
    """Base exception for POS Analytics errors.

    ``code`` is a short machine-readable tag (``INVALID_WINDOW``,
    ``UNKNOWN_REPORT``...) and ``details`` any extra context; both end up in
    ``to_dict()``, which the CLI prints when a report fails.
    """

    default_message = "An error occurred in POS Analytics"

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }

        if self.code:
            error_dict['code'] = self.code

        if self.details:
            error_dict['details'] = self.details

        return error_dict


class ConfigError(POSAnalyticsError):
    """Settings file could not be read."""
    default_message = "Configuration error"


class DatabaseError(POSAnalyticsError):
    """Engine creation or connection failures."""
    default_message = "Database error"


class ValidationError(POSAnalyticsError):
    """Invalid dates, windows, periods or scores."""
    default_message = "Validation error"


class CalculationError(POSAnalyticsError):
    default_message = "Calculation error"


class ReportingError(POSAnalyticsError):
    """Unknown reports and records that cannot be exported."""
    default_message = "Reporting error"
