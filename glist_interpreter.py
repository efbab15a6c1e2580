#!/usr/bin/env python3

from abc import abstractmethod
from typing import Any, Dict, Optional, Tuple

import attr

import glist
from glist_allocator import Block, BlockPool, NodeAllocator
from glist import Empty, GList
from glist_parser import Command, CommandParser, Op, Symbol, print_value
from glist_payload import PayloadKind


class Interpreter:

    @abstractmethod
    def init(self):
        raise NotImplementedError()

    @abstractmethod
    def read(self, string: str) -> Optional[Command]:
        raise NotImplementedError()

    @abstractmethod
    def eval(self, command: Command) -> Any:
        raise NotImplementedError()

    @abstractmethod
    def print(self, result: Any) -> str:
        raise NotImplementedError()

    def repl(self, string: str) -> Optional[str]:
        command = self.read(string)
        if command is None:
            return None
        return self.print(self.eval(command))

    @classmethod
    def quick_eval(cls, string: str, **kwargs):
        interpreter = cls(**kwargs)
        interpreter.init()
        return interpreter.repl(string)

    def load_file(self, filename: str):
        with open(filename, "r") as f:
            for l in f.readlines():
                lstrip = l.strip()
                if not lstrip:
                    continue
                print("> ", lstrip)
                self.repl(lstrip)


@attr.s(frozen=True)
class Listing:
    kind: Optional[PayloadKind] = attr.ib()
    values: Tuple[Any, ...] = attr.ib()

    def __str__(self):
        if self.kind is None:
            return "()"
        return f"{self.kind}{print_value(self.values)}"


class GlistInterpreter(Interpreter):
    """
    Keeps named lists and runs console commands against them. A name that was never added to (or was freed) is an
    empty list. Values of `ptr` lists are strings copied into blocks of a BlockPool.
    """

    def __init__(self, node_capacity: Optional[int] = None, block_size: int = 64):
        self.parser = CommandParser()
        self.node_capacity = node_capacity
        self.block_size = block_size
        self.init()

    def init(self):
        self.lists: Dict[str, GList] = {}
        self.allocator = NodeAllocator(capacity=self.node_capacity)
        self.blocks = BlockPool(self.block_size)

    def read(self, string: str) -> Optional[Command]:
        return self.parser.parse(string)

    def eval(self, command: Command) -> Any:
        match command:
            case Command(op=Op.ADD, args=(Symbol(value=name), Symbol(value=kind_name), *values)) if values:
                kind = PayloadKind.parse(kind_name)
                for value in values:
                    # store after every insertion so a failure keeps what was already added
                    self.lists[name] = self._add(self._get(name), kind, value)
                return self._listing(self._get(name))
            case Command(op=Op.HAS, args=(Symbol(value=name), value)):
                g = self._get(name)
                if g.kind is None:
                    return False
                return glist.chkdup(g, g.kind, value)
            case Command(op=Op.COUNT, args=(Symbol(value=name),)):
                return glist.count(self._get(name))
            case Command(op=Op.TAIL, args=(Symbol(value=name),)):
                node = glist.tail(self._get(name))
                return None if node is None else self._display(node.value)
            case Command(op=Op.REVERSE, args=(Symbol(value=name),)):
                self.lists[name] = glist.reverse(self._get(name))
                return self._listing(self.lists[name])
            case Command(op=Op.SHOW, args=(Symbol(value=name),)):
                return self._listing(self._get(name))
            case Command(op=Op.FREE, args=(Symbol(value=name),)):
                g = self.lists.pop(name, Empty())
                n = glist.count(g)
                glist.free(g)
                return n
            case Command(op=Op.DROP, args=(Symbol(value=name),)):
                g = self._get(name)
                n = glist.count(g)
                glist.free_with_payload(g, self.blocks.free)
                self.lists.pop(name, None)
                return n
            case Command(op=Op.LISTS, args=()):
                return {name: (g.kind, glist.count(g)) for name, g in sorted(self.lists.items())}
            case Command(op=Op.STATS, args=()):
                return {
                    "nodes": self.allocator.live,
                    "node_capacity": self.allocator.capacity,
                    "blocks": self.blocks.live,
                    "block_size": self.blocks.block_size,
                }
            case _:
                raise ValueError(f"Failed to evaluate command {self.print(command)}")

    def print(self, result: Any) -> str:
        return print_value(result)

    def _get(self, name: str) -> GList:
        return self.lists.get(name, Empty())

    def _add(self, g: GList, kind: PayloadKind, value: Any) -> GList:
        if kind is not PayloadKind.PTR:
            return glist.add(g, kind, value, allocator=self.allocator)
        if not isinstance(value, str):
            raise ValueError(f"ptr values must be strings, got {print_value(value)}")
        block = self.blocks.alloc()
        data = value.encode("utf-8")[:block.size]
        block.data[:len(data)] = data
        try:
            return glist.add(g, kind, block, allocator=self.allocator)
        except Exception:
            self.blocks.free(block)
            raise

    def _listing(self, g: GList) -> Listing:
        values = []
        if g.kind is not None:
            glist.apply(g, g.kind, lambda v: values.append(self._display(v)))
        return Listing(g.kind, tuple(values))

    @classmethod
    def _display(cls, value: Any) -> Any:
        if isinstance(value, Block):
            return bytes(value.data).rstrip(b"\0").decode("utf-8", errors="replace")
        return value
