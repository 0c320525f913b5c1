class ASTNode:
    # Optional source line (1-based). Parser sets this.
    line: int | None = None


class Expr(ASTNode):
    pass


class Stmt(ASTNode):
    pass


# ---------- EXPRESSIONS ----------
class Literal(Expr):
    def __init__(self, value, kind):
        self.value = value
        self.kind = kind  # token type it came from: NUMBER, STRING, TRUE, FALSE, NIL


class Unary(Expr):
    def __init__(self, op, operand):
        self.op = op            # Token
        self.operand = operand


class Binary(Expr):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op            # Token
        self.right = right


class Grouping(Expr):
    def __init__(self, inner):
        self.inner = inner


class Variable(Expr):
    def __init__(self, name):
        self.name = name        # Token


class Assign(Expr):
    def __init__(self, name, value):
        self.name = name        # Token
        self.value = value


class Logical(Expr):
    def __init__(self, left, op, right):
        # op is an AND/OR token; right is only evaluated when needed
        self.left = left
        self.op = op
        self.right = right


class Call(Expr):
    def __init__(self, callee, paren, args):
        self.callee = callee
        self.paren = paren      # closing ')' token, used for error lines
        self.args = args        # list[Expr]


# ---------- STATEMENTS ----------
class ExprStmt(Stmt):
    def __init__(self, expr):
        self.expr = expr


class PrintStmt(Stmt):
    def __init__(self, expr):
        self.expr = expr


class VarDeclStmt(Stmt):
    def __init__(self, name, initializer=None):
        self.name = name                # Token
        self.initializer = initializer  # Expr | None


class BlockStmt(Stmt):
    def __init__(self, statements):
        self.statements = statements


class IfStmt(Stmt):
    def __init__(self, condition, then_branch, else_branch=None):
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch


class WhileStmt(Stmt):
    def __init__(self, condition, body):
        self.condition = condition
        self.body = body


class FunDeclStmt(Stmt):
    def __init__(self, name, params, body):
        self.name = name        # Token
        self.params = params    # list[Token]
        self.body = body        # list[Stmt]


class ReturnStmt(Stmt):
    def __init__(self, keyword, value=None):
        self.keyword = keyword  # 'return' token
        self.value = value      # Expr | None
