import argparse
import logging
import traceback
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.lexers import PygmentsLexer
from pygments import highlight
from pygments.formatters.terminal256 import Terminal256Formatter
from pygments.lexer import RegexLexer, words
from pygments.token import Comment, Keyword, Name, Number, String, Text, Whitespace

from glist_interpreter import GlistInterpreter, Interpreter
from glist_parser import Op
from glist_payload import PayloadKind


class GlistLexer(RegexLexer):
    name = "glist"
    aliases = ["glist"]

    tokens = {
        "root": [
            (r"\s+", Whitespace),
            (r"[;#].*?$", Comment.Single),
            (words(tuple(op.value for op in Op), prefix=r"\b", suffix=r"\b"), Keyword),
            (words(tuple(kind.value for kind in PayloadKind), prefix=r"\b", suffix=r"\b"), Keyword.Type),
            (r"[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?|[+-]?\d+[eE][+-]?\d+", Number.Float),
            (r"[+-]?\d+", Number.Integer),
            (r'"(\\\\|\\"|[^"])*"', String.Double),
            (r"'(\\\\|\\'|[^'])*'", String.Single),
            (r"\w+", Name),
            (r".", Text),
        ]
    }


class Editor:

    def __init__(self, interpreter: Interpreter, prelude_filenames: List[str] = None):
        self.interpreter: Interpreter = interpreter
        self.prompt_session: PromptSession = None
        self.prelude_filenames = prelude_filenames or []
        self.init()

    def init(self):
        """
        Wipes interpreter state & resets prompt session
        """
        self.interpreter.init()
        self.prompt_session = PromptSession(lexer=PygmentsLexer(GlistLexer))

    def prompt(self) -> str:
        return self.prompt_session.prompt("> ")

    def print(self, s: str):
        print(highlight(s, GlistLexer(), Terminal256Formatter()).strip())

    def run(self):
        self.init()

        for fn in self.prelude_filenames:
            self.load_file(fn)

        while True:
            try:
                string = self.prompt()
            except EOFError:
                return
            if not string:
                continue
            try:
                # parse special commands
                if string.startswith("!"):
                    match string.split():
                        case "!load", *_:
                            filename = string.replace("!load ", "").strip()
                            print("Loading ", filename, "...")
                            self.load_file(filename)
                        case "!reset", *_:
                            self.interpreter.init()
                        case _:
                            raise ValueError(f"Could not understand command {string}")
                    continue
                else:
                    command = self.interpreter.read(string)
                    if command is None:
                        continue
                    result = self.interpreter.eval(command)
                    self.print(self.interpreter.print(result))
            except Exception as e:
                traceback.print_exception(e)

    def load_file(self, filename: str):
        with open(filename, "r") as f:
            for l in f.readlines():
                lstrip = l.strip()
                if not lstrip:
                    continue
                self.print("> " + lstrip)
                result = self.interpreter.repl(lstrip)
                if result is not None:
                    self.print(result)


def build_arg_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(description="Interactive console for generic linked lists")
    arg_parser.add_argument("prelude", nargs="*", help="command files to run before prompting")
    arg_parser.add_argument("--node-capacity", type=int, default=None,
                            help="maximum number of live list nodes (default: unbounded)")
    arg_parser.add_argument("--block-size", type=int, default=64,
                            help="size in bytes of the blocks backing ptr values")
    arg_parser.add_argument("--log-level", default="WARNING",
                            choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return arg_parser


def main(argv: Optional[List[str]] = None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    interpreter = GlistInterpreter(node_capacity=args.node_capacity, block_size=args.block_size)
    Editor(interpreter, args.prelude).run()


if __name__ == "__main__":
    main()
