import math
import sys
import weakref

from ast_nodes import (
    Literal, Unary, Binary, Grouping, Variable, Assign, Logical, Call,
    ExprStmt, PrintStmt, VarDeclStmt, BlockStmt, IfStmt, WhileStmt, FunDeclStmt, ReturnStmt,
)
from environment import Environment
from errors import LoxRuntimeError
from natives import LoxCallable, define_natives

# Python frames used by one Lox call through a block body (call, execute_block, execute, evaluate, ...)
FRAMES_PER_CALL = 16


class ReturnSignal(Exception):
    # Unwinds a function body. LoxFunction.call catches it; interpret() turns a
    # stray top-level one into a runtime error so it never leaves the interpreter.
    def __init__(self, value, keyword=None):
        super().__init__()
        self.value = value
        self.keyword = keyword


class LoxFunction(LoxCallable):
    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure  # environment active where the function was declared

    @property
    def name(self):
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter, args):
        # parameters live in a frame whose parent is the closure, not the caller
        env = Environment(self.closure)
        for param, value in zip(self.declaration.params, args):
            env.define(param.lexeme, value)

        try:
            interpreter.execute_block(self.declaration.body, env)
        except ReturnSignal as ret:
            return ret.value
        return None

    def __repr__(self):
        return f"<fn {self.name}>"


def is_truthy(value) -> bool:
    return value is not None and value is not False


def is_equal(a, b) -> bool:
    # no coercion: true != 1, nil only equals nil
    if type(a) is not type(b):
        return False
    return a == b


def stringify(value) -> str:
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def divide(left: float, right: float) -> float:
    # IEEE-754 semantics instead of ZeroDivisionError
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter:
    def __init__(self, reporter, out=None):
        self.reporter = reporter
        self.out = out if out is not None else sys.stdout

        self.MAX_CALL_DEPTH = 1000

        self.globals = define_natives(Environment())
        self.environment = self.globals   # current scope (globals at top-level)
        # node -> scope distance, filled by the resolver; entries go away with their AST
        self.locals = weakref.WeakKeyDictionary()
        self.resolved = False             # set once a resolver pass has run
        self.call_stack = []              # list of frames, innermost last

        self.last_value = None

    # ---------- TOP LEVEL ----------
    def interpret(self, statements):
        # one Lox call costs several Python frames; make room for MAX_CALL_DEPTH of them
        old_limit = sys.getrecursionlimit()
        needed = self.MAX_CALL_DEPTH * FRAMES_PER_CALL + 1000
        if needed > old_limit:
            sys.setrecursionlimit(needed)
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as err:
            self.reporter.runtime_error(err)
        except ReturnSignal as ret:
            self.reporter.runtime_error(LoxRuntimeError(ret.keyword, "Can't return from top-level code."))
        except RecursionError:
            self.reporter.runtime_error(LoxRuntimeError(None, "Stack overflow."))
        finally:
            sys.setrecursionlimit(old_limit)

    def resolve(self, expr, depth: int):
        self.locals[expr] = depth

    def build_stacktrace(self):
        # most recent first
        return [dict(fr) for fr in reversed(self.call_stack)]

    # ---------- STATEMENTS ----------
    def execute(self, stmt):
        if isinstance(stmt, ExprStmt):
            self.last_value = self.evaluate(stmt.expr)
            return

        if isinstance(stmt, PrintStmt):
            value = self.evaluate(stmt.expr)
            self.last_value = value
            print(stringify(value), file=self.out)
            return

        if isinstance(stmt, VarDeclStmt):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return

        if isinstance(stmt, FunDeclStmt):
            # defined before the body ever runs, so the function can call itself
            self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))
            return

        if isinstance(stmt, BlockStmt):
            self.execute_block(stmt.statements, Environment(self.environment))
            return

        if isinstance(stmt, IfStmt):
            if is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)
            return

        if isinstance(stmt, WhileStmt):
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)
            return

        if isinstance(stmt, ReturnStmt):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            raise ReturnSignal(value, stmt.keyword)

        raise Exception(f"Unknown statement node: {type(stmt).__name__}")

    def execute_block(self, statements, env):
        previous = self.environment
        try:
            self.environment = env
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    # ---------- EXPRESSIONS ----------
    def evaluate(self, expr):
        if isinstance(expr, Literal):
            return expr.value

        if isinstance(expr, Grouping):
            return self.evaluate(expr.inner)

        if isinstance(expr, Variable):
            return self.lookup_variable(expr.name, expr)

        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            elif self.resolved:
                self.globals.assign(expr.name, value)
            else:
                self.environment.assign(expr.name, value)
            return value

        if isinstance(expr, Unary):
            return self.eval_unary(expr)

        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.op.type == "OR":
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        if isinstance(expr, Binary):
            return self.eval_binary(expr)

        if isinstance(expr, Call):
            return self.eval_call(expr)

        raise Exception(f"Unknown expression node: {type(expr).__name__}")

    def lookup_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name)
        if self.resolved:
            # the resolver found no local binding, so it must be a global
            return self.globals.get(name)
        return self.environment.get(name)

    def eval_unary(self, expr):
        operand = self.evaluate(expr.operand)

        if expr.op.type == "MINUS":
            if not isinstance(operand, float):
                raise LoxRuntimeError(expr.op, "Operand must be a number.")
            return -operand

        if expr.op.type == "BANG":
            return not is_truthy(operand)

        raise Exception(f"Unknown unary operator: {expr.op.type}")

    def check_number_operands(self, op, left, right):
        if isinstance(left, float) and isinstance(right, float):
            return
        raise LoxRuntimeError(op, "Operands must be numbers.")

    def eval_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.op

        if op.type == "PLUS":
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

        if op.type == "EQUAL_EQUAL":
            return is_equal(left, right)
        if op.type == "BANG_EQUAL":
            return not is_equal(left, right)

        self.check_number_operands(op, left, right)

        if op.type == "MINUS":
            return left - right
        if op.type == "STAR":
            return left * right
        if op.type == "SLASH":
            return divide(left, right)
        if op.type == "GREATER":
            return left > right
        if op.type == "GREATER_EQUAL":
            return left >= right
        if op.type == "LESS":
            return left < right
        if op.type == "LESS_EQUAL":
            return left <= right

        raise Exception(f"Unknown binary operator: {op.type}")

    def eval_call(self, expr):
        callee = self.evaluate(expr.callee)
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions.")

        args = []
        for arg in expr.args:
            args.append(self.evaluate(arg))

        if len(args) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(args)}.")

        if len(self.call_stack) >= self.MAX_CALL_DEPTH:
            raise LoxRuntimeError(expr.paren, "Stack overflow.")

        self.call_stack.append({"func": callee.name, "line": expr.paren.line})
        try:
            return callee.call(self, args)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.", frames=self.build_stacktrace()) from None
        except LoxRuntimeError as err:
            # capture the trace at the innermost call boundary only
            if not err.frames:
                err.frames = self.build_stacktrace()
            raise
        finally:
            self.call_stack.pop()
