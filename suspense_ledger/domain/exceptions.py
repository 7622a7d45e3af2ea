"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PartyLookupError(DomainException):
    """Party store query failed or is unavailable"""

    pass


class InvalidReferenceYearError(DomainException):
    """Reference year cannot anchor a calendar date"""

    pass
