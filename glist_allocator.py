"""
Fixed-size allocators backing list nodes and pointer payloads.

Every object handed out remembers which pool it came from and whether it has been freed, so returning memory to
the wrong pool, freeing it twice, or touching it after it was freed is reported instead of silently corrupting
anything.
"""
import logging
from typing import Callable, Optional, TypeVar

import attr

from glist_errors import AllocationError, DoubleFreeError, ForeignBlockError, UseAfterFreeError

logger = logging.getLogger(__name__)


class Allocation:
    _owner: Optional["Pool"] = None
    _freed: bool = False

    @property
    def freed(self) -> bool:
        return self._freed

    @property
    def owner(self) -> Optional["Pool"]:
        return self._owner

    def _check_live(self):
        if self._freed:
            raise UseAfterFreeError(f"{type(self).__name__} accessed after it was freed")


A = TypeVar("A", bound=Allocation)


@attr.s
class Pool:
    capacity: Optional[int] = attr.ib(default=None, kw_only=True)
    live: int = attr.ib(default=0, init=False)
    allocated: int = attr.ib(default=0, init=False)
    released: int = attr.ib(default=0, init=False)

    @capacity.validator
    def _check_capacity(self, attribute, value):
        if value is not None and value < 0:
            raise ValueError(f"capacity must be >= 0, got {value}")

    def _reserve(self):
        if self.capacity is not None and self.live >= self.capacity:
            logger.debug("%s exhausted: %d of %d in use", type(self).__name__, self.live, self.capacity)
            raise AllocationError(f"{type(self).__name__} exhausted ({self.capacity} in use)")

    def _adopt(self, obj: A) -> A:
        obj._owner = self
        obj._freed = False
        self.live += 1
        self.allocated += 1
        return obj

    def _release(self, obj: Allocation):
        if getattr(obj, "_owner", None) is not self:
            raise ForeignBlockError(f"{obj!r} was not allocated by this {type(self).__name__}")
        if obj._freed:
            raise DoubleFreeError(f"{type(obj).__name__} freed twice")
        obj._freed = True
        self.live -= 1
        self.released += 1


@attr.s
class NodeAllocator(Pool):

    def allocate(self, factory: Callable[..., A], *args) -> A:
        self._reserve()
        return self._adopt(factory(*args))

    def release(self, obj: Allocation):
        self._release(obj)


@attr.s(eq=False)
class Block(Allocation):
    size: int = attr.ib()
    _data: bytearray = attr.ib(repr=False)

    @property
    def data(self) -> bytearray:
        self._check_live()
        return self._data


@attr.s
class BlockPool(Pool):
    """Hands out zeroed blocks of exactly `block_size` bytes"""
    block_size: int = attr.ib()

    @block_size.validator
    def _check_block_size(self, attribute, value):
        if value <= 0:
            raise ValueError(f"block_size must be positive, got {value}")

    def alloc(self) -> Block:
        self._reserve()
        return self._adopt(Block(self.block_size, bytearray(self.block_size)))

    def free(self, block: Block):
        self._release(block)
