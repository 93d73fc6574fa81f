"""
Custom exceptions for LK-TSP.
Provides specific exception classes for different error types.
"""


class TSPException(Exception):
    """Base exception for the LK-TSP system."""

    def __init__(self, message: str = "", details: dict = None):
        """
        Initialize TSP exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class TsplibFormatError(TSPException):
    """Raised when a TSPLIB problem or tour file cannot be interpreted."""

    def __init__(self, reason: str = None, line_number: int = None,
                 keyword: str = None):
        """
        Initialize TSPLIB format error.

        Args:
            reason: What is wrong with the file
            line_number: 1-based line number where the problem was detected
            keyword: TSPLIB keyword involved, if any
        """
        message = "Invalid TSPLIB format"
        details = {}

        if line_number is not None:
            details['line'] = line_number
        if keyword:
            details['keyword'] = keyword

        if reason:
            message += f": {reason}"
            if line_number is not None:
                message += f" (line {line_number})"

        super().__init__(message, details)


class TourFileMismatchError(TSPException):
    """Raised when a tour file does not belong to the loaded problem."""

    def __init__(self, tour_name: str = None, problem_name: str = None):
        message = "The TSPLIB tour file does not belong to the TSPLIB problem file"
        details = {}

        if tour_name is not None:
            details['tour_name'] = tour_name
        if problem_name is not None:
            details['problem_name'] = problem_name

        super().__init__(message, details)


class InvalidExchangeError(TSPException):
    """Raised when an alternating walk cannot be exchanged into a tour."""

    def __init__(self, walk: list = None, reason: str = None):
        """
        Initialize invalid exchange error.

        Args:
            walk: The closed alternating walk that was rejected
            reason: Reason for rejection
        """
        message = "Invalid exchange"
        details = {}

        if walk is not None:
            details['walk'] = list(walk)
        if reason:
            details['reason'] = reason
            message += f": {reason}"

        super().__init__(message, details)


class SearchInvariantError(TSPException):
    """Raised when the search engine detects an internal inconsistency.

    This always indicates a defect in the engine and is never recovered from.
    """

    def __init__(self, structure: str = None, actual: int = None,
                 expected: int = None):
        message = "Search invariant violated"
        details = {}

        if structure:
            details['structure'] = structure
        if actual is not None:
            details['actual'] = actual
        if expected is not None:
            details['expected'] = expected

        if structure:
            message += f": {structure} size (={actual}) is not i+1 (={expected})"

        super().__init__(message, details)


class InvalidConfigurationError(TSPException):
    """Raised when configuration parameters are invalid."""

    def __init__(self, parameter: str = None, value: any = None,
                 expected: str = None):
        """
        Initialize invalid configuration error.

        Args:
            parameter: Parameter name
            value: Invalid value
            expected: Expected value or range
        """
        message = "Invalid configuration parameter"
        details = {}

        if parameter:
            details['parameter'] = parameter
        if value is not None:
            details['value'] = value
        if expected:
            details['expected'] = expected

        if parameter:
            message += f": {parameter} = {value}"
            if expected:
                message += f" (expected: {expected})"

        super().__init__(message, details)
