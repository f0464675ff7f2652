"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransactionSourceError(DomainException):
    """Balance or transaction source returned an error or is unavailable"""

    pass


class InvalidTransactionDataError(TransactionSourceError):
    """Transaction batch contains a malformed entry"""

    pass


class InsightBuilderError(DomainException):
    """Insight builder failed or returned an unusable response"""

    pass
