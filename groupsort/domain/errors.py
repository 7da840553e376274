# groupsort/domain/errors.py
"""
Exceptions raised by the domain layer.

The HTTP layer translates these into HTTPException responses; scripts and
tests catch them directly.
"""


class SchemeError(Exception):
    """Base class for every failure raised while working on a scheme."""


class DataQualityError(SchemeError):
    """
    Raised by enforce() when a validator pass finds blocking errors.
    Carries the full report so callers can surface every message.
    """

    def __init__(self, report):
        self.report = report
        super().__init__(f"Data quality check failed: {'; '.join(report.errors)}")


class MalformedSnapshotError(SchemeError):
    pass


class UnknownStrategyError(SchemeError):
    pass


class NotFoundError(SchemeError):
    pass


class GroupFullError(SchemeError):
    pass


class SchemeExistsError(SchemeError):
    pass
