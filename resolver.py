from ast_nodes import (
    Literal, Unary, Binary, Grouping, Variable, Assign, Logical, Call,
    ExprStmt, PrintStmt, VarDeclStmt, BlockStmt, IfStmt, WhileStmt, FunDeclStmt, ReturnStmt,
)


class Resolver:
    """Static pass run after parsing and before any statement executes.

    Walks the tree with a stack of scopes (name -> ready?). It rejects reading a
    local inside its own initializer and `return` at top level, and tells the
    interpreter how many frames separate each local reference from its binding.
    The global scope is never pushed; anything not found in a scope is a global.
    """

    def __init__(self, interpreter, reporter):
        self.interpreter = interpreter
        self.reporter = reporter
        self.scopes = []
        self.function_depth = 0

    # ---------- TOP LEVEL ----------
    def resolve(self, statements):
        self.interpreter.resolved = True
        for stmt in statements:
            self.resolve_stmt(stmt)

    # ---------- SCOPES ----------
    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return
        # not found: left for the globals frame at runtime

    def resolve_function(self, stmt):
        self.function_depth += 1
        self.begin_scope()
        for param in stmt.params:
            self.declare(param)
            self.define(param)
        for body_stmt in stmt.body:
            self.resolve_stmt(body_stmt)
        self.end_scope()
        self.function_depth -= 1

    # ---------- STATEMENTS ----------
    def resolve_stmt(self, stmt):
        if isinstance(stmt, BlockStmt):
            self.begin_scope()
            for inner in stmt.statements:
                self.resolve_stmt(inner)
            self.end_scope()
            return

        if isinstance(stmt, VarDeclStmt):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)
            return

        if isinstance(stmt, FunDeclStmt):
            # name is ready before the body so the function can recurse
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt)
            return

        if isinstance(stmt, (ExprStmt, PrintStmt)):
            self.resolve_expr(stmt.expr)
            return

        if isinstance(stmt, IfStmt):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)
            return

        if isinstance(stmt, WhileStmt):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)
            return

        if isinstance(stmt, ReturnStmt):
            if self.function_depth == 0:
                self.reporter.parse_error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                self.resolve_expr(stmt.value)
            return

        raise Exception(f"Unknown statement node: {type(stmt).__name__}")

    # ---------- EXPRESSIONS ----------
    def resolve_expr(self, expr):
        if isinstance(expr, Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self.reporter.parse_error(expr.name, "Can't read local variable in its own initializer.")
            self.resolve_local(expr, expr.name)
            return

        if isinstance(expr, Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr, expr.name)
            return

        if isinstance(expr, (Binary, Logical)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)
            return

        if isinstance(expr, Unary):
            self.resolve_expr(expr.operand)
            return

        if isinstance(expr, Grouping):
            self.resolve_expr(expr.inner)
            return

        if isinstance(expr, Call):
            self.resolve_expr(expr.callee)
            for arg in expr.args:
                self.resolve_expr(arg)
            return

        if isinstance(expr, Literal):
            return

        raise Exception(f"Unknown expression node: {type(expr).__name__}")
