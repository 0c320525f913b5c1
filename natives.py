import time


class LoxCallable:
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter, args):
        raise NotImplementedError


class NativeFunction(LoxCallable):
    def __init__(self, name: str, arity: int, fn):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter, args):
        return self.fn(*args)

    def __repr__(self):
        return "<native fn>"


def _clock():
    return time.time()


NATIVES = [
    ("clock", 0, _clock),
]


def define_natives(env):
    # Each interpreter gets its own NativeFunction objects in its own globals frame.
    for name, arity, fn in NATIVES:
        env.define(name, NativeFunction(name, arity, fn))
    return env
