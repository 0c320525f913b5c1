from errors import LoxRuntimeError


class Environment:
    """One scope frame: name -> value, plus a link to the enclosing frame.

    The globals frame has enclosing=None. Closures keep their defining frame
    alive simply by holding a reference to it.
    """

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name: str, value):
        # redeclaring in the same frame overwrites
        self.values[name] = value

    def get(self, token):
        name = token.lexeme
        env = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.enclosing
        raise LoxRuntimeError(token, f"Undefined variable '{name}'.")

    def assign(self, token, value):
        name = token.lexeme
        env = self
        while env is not None:
            if name in env.values:
                env.values[name] = value
                return
            env = env.enclosing
        raise LoxRuntimeError(token, f"Undefined variable '{name}'.")

    # ---------- RESOLVED ACCESS ----------
    def ancestor(self, distance: int):
        env = self
        for _ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance: int, token):
        values = self.ancestor(distance).values
        if token.lexeme not in values:
            raise LoxRuntimeError(token, f"Undefined variable '{token.lexeme}'.")
        return values[token.lexeme]

    def assign_at(self, distance: int, token, value):
        self.ancestor(distance).values[token.lexeme] = value

    def __repr__(self):
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"<Environment depth={depth} names={list(self.values)}>"
