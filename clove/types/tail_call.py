from clove import SExpression
from clove.types.environment import Environment


class TailCall:
    """A function body still to run in `env`; the trampoline in apply.resolve steps it."""

    __slots__ = ("body", "env")

    def __init__(self, body: list[SExpression], env: Environment):
        self.body = body
        self.env = env
