"""
Generic linear linked lists.

Only insert at the head of a list, and no selective deletions: a list is destroyed as a whole. A list is just its
head node (or Empty()), so every mutating operation hands back the head to use from then on.

Each node carries a tagged payload of one of the PayloadKinds, and all nodes of a list share the kind of the first
one inserted. Reading or inserting with another kind raises KindMismatchError.
"""
import itertools
import logging
from typing import Any, Callable, Iterator, Optional

import attr

from glist_allocator import Allocation, NodeAllocator
from glist_errors import ForeignBlockError, KindMismatchError, PayloadValueError
from glist_payload import Payload, PayloadKind

logger = logging.getLogger(__name__)

DEFAULT_ALLOCATOR = NodeAllocator()

_NO_MATCH = object()


class GList:

    def __eq__(self, other):
        if not isinstance(other, GList):
            return NotImplemented
        for a, b in itertools.zip_longest(_nodes(self), _nodes(other)):
            if a is None or b is None or a.payload != b.payload:
                return False
        return True

    __hash__ = None

    def __len__(self):
        # NOTE! Can be expensive, traverses whole list
        return count(self)

    def __iter__(self) -> Iterator[Any]:
        return iterate(self)

    def __str__(self):
        return "(" + " ".join(repr(v) for v in self) + ")"

    @property
    def kind(self) -> Optional[PayloadKind]:
        return None

    @classmethod
    def empty(cls) -> "GList":
        return Empty()

    @classmethod
    def of(cls, kind: PayloadKind, *values, allocator: Optional[NodeAllocator] = None) -> "GList":
        """Builds a list whose head-to-tail order is the order of `values`"""
        g = cls.empty()
        for v in reversed(values):
            g = add(g, kind, v, allocator=allocator)
        return g


class Empty(GList):
    def __bool__(self):
        return False

    def __repr__(self):
        return "Empty()"


@attr.s(eq=False, repr=False)
class Node(GList, Allocation):
    __match_args__ = ("payload", "next")
    _payload: Payload = attr.ib()
    _next: GList = attr.ib()

    def __bool__(self):
        return True

    @property
    def payload(self) -> Payload:
        self._check_live()
        return self._payload

    @property
    def next(self) -> GList:
        self._check_live()
        return self._next

    @property
    def kind(self) -> PayloadKind:
        return self.payload.kind

    @property
    def value(self) -> Any:
        return self.payload.value

    @property
    def ptr(self) -> Any:
        return self.payload.ptr

    @property
    def int32(self) -> int:
        return self.payload.int32

    @property
    def uint32(self) -> int:
        return self.payload.uint32

    @property
    def float32(self) -> float:
        return self.payload.float32

    @property
    def float64(self) -> float:
        return self.payload.float64

    def __repr__(self):
        if self.freed:
            return "<Node (freed)>"
        return f"<Node {self._payload!r}>"


def _check_glist(g: Any):
    if not isinstance(g, GList):
        raise TypeError(f"expected a GList, got {type(g).__name__}")


def _nodes(g: GList) -> Iterator[Node]:
    _check_glist(g)
    node = g
    while isinstance(node, Node):
        yield node
        node = node.next


# Insertion

def add(g: GList, kind: PayloadKind, value: Any, allocator: Optional[NodeAllocator] = None) -> Node:
    """
    Creates a node holding `value` and links it in front of `g`. Returns the new head.
    On any failure nothing is linked and `g` stays valid.
    """
    _check_glist(g)
    if g.kind is not None and g.kind is not kind:
        raise KindMismatchError(f"can't add {kind} value to a list of {g.kind}")
    payload = Payload.of(kind, value)
    return (allocator or DEFAULT_ALLOCATOR).allocate(Node, payload, g)


def add_ptr(g: GList, ptr: Any, allocator: Optional[NodeAllocator] = None) -> Node:
    return add(g, PayloadKind.PTR, ptr, allocator)


def add_int32(g: GList, val: int, allocator: Optional[NodeAllocator] = None) -> Node:
    return add(g, PayloadKind.INT32, val, allocator)


def add_uint32(g: GList, val: int, allocator: Optional[NodeAllocator] = None) -> Node:
    return add(g, PayloadKind.UINT32, val, allocator)


def add_float32(g: GList, val: float, allocator: Optional[NodeAllocator] = None) -> Node:
    return add(g, PayloadKind.FLOAT32, val, allocator)


def add_float64(g: GList, val: float, allocator: Optional[NodeAllocator] = None) -> Node:
    return add(g, PayloadKind.FLOAT64, val, allocator)


# Duplicate checks. Pointers are compared by identity only, never by the data pointed to.

def chkdup(g: GList, kind: PayloadKind, value: Any) -> bool:
    try:
        wanted = kind.coerce(value)
    except PayloadValueError:
        # a value the kind can't hold equals nothing stored; the walk still checks the kinds
        wanted = _NO_MATCH
    return any(node.payload.matches(kind, wanted) for node in _nodes(g))


def chkdup_ptr(g: GList, ptr: Any) -> bool:
    return chkdup(g, PayloadKind.PTR, ptr)


def chkdup_int32(g: GList, val: int) -> bool:
    return chkdup(g, PayloadKind.INT32, val)


def chkdup_uint32(g: GList, val: int) -> bool:
    return chkdup(g, PayloadKind.UINT32, val)


def chkdup_float32(g: GList, val: float) -> bool:
    return chkdup(g, PayloadKind.FLOAT32, val)


def chkdup_float64(g: GList, val: float) -> bool:
    return chkdup(g, PayloadKind.FLOAT64, val)


def reverse(g: GList) -> GList:
    """
    Reverses `g` in place by relinking its nodes; nothing is allocated.
    Returns the new head. The old head is now the tail.
    """
    _check_glist(g)
    if not isinstance(g, Node):
        return g
    prev: GList = Empty()
    node = g
    while isinstance(node, Node):
        following = node.next
        node._next = prev
        prev = node
        node = following
    return prev


def count(g: GList) -> int:
    return sum(1 for _ in _nodes(g))


def tail(g: GList) -> Optional[Node]:
    last = None
    for last in _nodes(g):
        pass
    return last


# Traversal

def iterate(g: GList, kind: Optional[PayloadKind] = None) -> Iterator[Any]:
    for node in _nodes(g):
        yield node.value if kind is None else node.payload.get(kind)


def apply(g: GList, kind: PayloadKind, func: Callable[[Any], Any]):
    for value in iterate(g, kind):
        func(value)


def apply_ptr(g: GList, func: Callable[[Any], Any]):
    apply(g, PayloadKind.PTR, func)


def apply_int32(g: GList, func: Callable[[int], Any]):
    apply(g, PayloadKind.INT32, func)


def apply_uint32(g: GList, func: Callable[[int], Any]):
    apply(g, PayloadKind.UINT32, func)


def apply_float32(g: GList, func: Callable[[float], Any]):
    apply(g, PayloadKind.FLOAT32, func)


def apply_float64(g: GList, func: Callable[[float], Any]):
    apply(g, PayloadKind.FLOAT64, func)


# Destruction

def _check_owned(g: GList):
    for node in _nodes(g):
        if node.owner is None:
            raise ForeignBlockError(f"{node!r} was not created by an allocator and can't be freed")


def free(g: GList):
    """
    Returns every node of `g` to its allocator. Payloads are left alone; release them first if needed, or use
    free_with_payload. Any node of `g` is unusable afterwards.
    """
    _check_owned(g)
    freed = 0
    node = g
    while isinstance(node, Node):
        following = node.next
        node.owner.release(node)
        node = following
        freed += 1
    logger.debug("freed list of %d nodes", freed)


def free_with_payload(g: GList, release: Callable[[Any], Any]):
    """
    Frees a list of pointers together with what they point to: for each node, `release(ptr)` is called and then
    the node itself is freed. `release` is usually BlockPool.free of the pool the payloads came from.
    """
    for node in _nodes(g):
        if node.kind is not PayloadKind.PTR:
            raise KindMismatchError(f"free_with_payload needs a list of {PayloadKind.PTR}, found {node.kind}")
    _check_owned(g)
    freed = 0
    node = g
    while isinstance(node, Node):
        following = node.next
        release(node.ptr)
        node.owner.release(node)
        node = following
        freed += 1
    logger.debug("freed list of %d nodes with payloads", freed)
