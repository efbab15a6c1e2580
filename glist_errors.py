class GlistError(Exception):
    pass


class KindMismatchError(GlistError, TypeError):
    """A payload was read, compared or inserted with the wrong kind"""


class PayloadValueError(GlistError, ValueError):
    """A value can't be represented by the requested payload kind"""


class AllocationError(GlistError, MemoryError):
    """
    The allocator is exhausted. Raised before anything is linked, so the list passed to the failed
    insertion is still valid.
    """


class UseAfterFreeError(GlistError, RuntimeError):
    pass


class DoubleFreeError(GlistError, RuntimeError):
    pass


class ForeignBlockError(GlistError, ValueError):
    """Memory was returned to an allocator that didn't hand it out"""
