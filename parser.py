from ast_nodes import (
    Literal, Unary, Binary, Grouping, Variable, Assign, Logical, Call,
    ExprStmt, PrintStmt, VarDeclStmt, BlockStmt, IfStmt, WhileStmt, FunDeclStmt, ReturnStmt,
)
from errors import ParseError

MAX_ARGS = 255

# tokens that usually begin a statement; synchronize() stops in front of them
STATEMENT_STARTS = ("CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN")


class Parser:
    def __init__(self, tokens, reporter):
        self.tokens = tokens
        self.reporter = reporter
        self.current = 0

    # ---------- TOKEN CURSOR ----------
    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def is_at_end(self):
        return self.peek().type == "EOF"

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def check(self, token_type):
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def match(self, *token_types):
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    # move past the next token, but only if it is what we expect
    def eat(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token, message):
        self.reporter.parse_error(token, message)
        return ParseError(message)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == "SEMICOLON":
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    @staticmethod
    def at(node, token):
        node.line = token.line
        return node

    # ---------- TOP LEVEL ----------
    def parse(self):
        statements = []
        while not self.is_at_end():
            try:
                stmt = self.declaration()
            except RecursionError:
                self.error(self.peek(), "Expression too deeply nested.")
                self.synchronize()
                continue
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self):
        # A single bare expression and nothing else (REPL echo). None on any error.
        try:
            expr = self.expression()
        except ParseError:
            return None
        except RecursionError:
            self.error(self.peek(), "Expression too deeply nested.")
            return None
        if not self.is_at_end():
            self.error(self.peek(), "Expect end of expression.")
            return None
        return expr

    # ---------- DECLARATIONS ----------
    def declaration(self):
        try:
            if self.match("VAR"):
                return self.var_declaration()
            if self.match("FUN"):
                return self.fun_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def var_declaration(self):
        name = self.eat("IDENTIFIER", "Expect variable name.")
        initializer = None
        if self.match("EQUAL"):
            initializer = self.expression()
        self.eat("SEMICOLON", "Expect ';' after variable declaration.")
        return self.at(VarDeclStmt(name, initializer), name)

    def fun_declaration(self):
        name = self.eat("IDENTIFIER", "Expect function name.")
        self.eat("LEFT_PAREN", "Expect '(' after function name.")

        params = []
        if not self.check("RIGHT_PAREN"):
            params.append(self.eat("IDENTIFIER", "Expect parameter name."))
            while self.match("COMMA"):
                if len(params) >= MAX_ARGS:
                    # soft limit: report and keep going
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.eat("IDENTIFIER", "Expect parameter name."))
        self.eat("RIGHT_PAREN", "Expect ')' after parameters.")

        self.eat("LEFT_BRACE", "Expect '{' before function body.")
        body = self.block()
        return self.at(FunDeclStmt(name, params, body), name)

    # ---------- STATEMENTS ----------
    def statement(self):
        if self.match("PRINT"):
            return self.print_statement()
        if self.match("RETURN"):
            return self.return_statement()
        if self.match("IF"):
            return self.if_statement()
        if self.match("WHILE"):
            return self.while_statement()
        if self.match("FOR"):
            return self.for_statement()
        if self.match("LEFT_BRACE"):
            tok = self.previous()
            return self.at(BlockStmt(self.block()), tok)
        return self.expression_statement()

    def block(self):
        # assumes '{' was already consumed
        statements = []
        while not self.check("RIGHT_BRACE") and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.eat("RIGHT_BRACE", "Expect '}' after block.")
        return statements

    def print_statement(self):
        tok = self.previous()
        expr = self.expression()
        self.eat("SEMICOLON", "Expect ';' after value.")
        return self.at(PrintStmt(expr), tok)

    def return_statement(self):
        keyword = self.previous()
        value = None
        if not self.check("SEMICOLON"):
            value = self.expression()
        self.eat("SEMICOLON", "Expect ';' after return value.")
        return self.at(ReturnStmt(keyword, value), keyword)

    def expression_statement(self):
        tok = self.peek()
        expr = self.expression()
        self.eat("SEMICOLON", "Expect ';' after expression.")
        return self.at(ExprStmt(expr), tok)

    def if_statement(self):
        tok = self.previous()
        self.eat("LEFT_PAREN", "Expect '(' after 'if'.")
        condition = self.expression()
        self.eat("RIGHT_PAREN", "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        # a dangling else binds to the nearest if
        if self.match("ELSE"):
            else_branch = self.statement()
        return self.at(IfStmt(condition, then_branch, else_branch), tok)

    def while_statement(self):
        tok = self.previous()
        self.eat("LEFT_PAREN", "Expect '(' after 'while'.")
        condition = self.expression()
        self.eat("RIGHT_PAREN", "Expect ')' after condition.")
        body = self.statement()
        return self.at(WhileStmt(condition, body), tok)

    def for_statement(self):
        # Desugared into:
        #   { initializer; while (condition) { body; increment; } }
        tok = self.previous()
        self.eat("LEFT_PAREN", "Expect '(' after 'for'.")

        if self.match("SEMICOLON"):
            initializer = None
        elif self.match("VAR"):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check("SEMICOLON"):
            condition = self.expression()
        self.eat("SEMICOLON", "Expect ';' after loop condition.")

        increment = None
        if not self.check("RIGHT_PAREN"):
            increment = self.expression()
        self.eat("RIGHT_PAREN", "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = self.at(BlockStmt([body, self.at(ExprStmt(increment), tok)]), tok)
        if condition is None:
            condition = self.at(Literal(True, "TRUE"), tok)
        body = self.at(WhileStmt(condition, body), tok)
        if initializer is not None:
            body = self.at(BlockStmt([initializer, body]), tok)
        return body

    # ---------- EXPRESSIONS ----------
    # expression -> assignment
    def expression(self):
        return self.assignment()

    # assignment -> logic_or ("=" assignment)?
    def assignment(self):
        expr = self.logic_or()

        if self.match("EQUAL"):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return self.at(Assign(expr.name, value), expr.name)
            # reported, not raised: the parser is not confused, so no need to synchronize
            self.error(equals, "Invalid assignment target.")
            return value

        return expr

    # logic_or -> logic_and ("or" logic_and)*
    def logic_or(self):
        expr = self.logic_and()
        while self.match("OR"):
            op = self.previous()
            right = self.logic_and()
            expr = self.at(Logical(expr, op, right), op)
        return expr

    # logic_and -> equality ("and" equality)*
    def logic_and(self):
        expr = self.equality()
        while self.match("AND"):
            op = self.previous()
            right = self.equality()
            expr = self.at(Logical(expr, op, right), op)
        return expr

    def binary_left_assoc(self, operand, *operators):
        expr = operand()
        while self.match(*operators):
            op = self.previous()
            right = operand()
            expr = self.at(Binary(expr, op, right), op)
        return expr

    # equality -> comparison (("!=" | "==") comparison)*
    def equality(self):
        return self.binary_left_assoc(self.comparison, "BANG_EQUAL", "EQUAL_EQUAL")

    # comparison -> term (("<" | "<=" | ">" | ">=") term)*
    def comparison(self):
        return self.binary_left_assoc(self.term, "LESS", "LESS_EQUAL", "GREATER", "GREATER_EQUAL")

    # term -> factor (("-" | "+") factor)*
    def term(self):
        return self.binary_left_assoc(self.factor, "MINUS", "PLUS")

    # factor -> unary (("/" | "*") unary)*
    def factor(self):
        return self.binary_left_assoc(self.unary, "SLASH", "STAR")

    # unary -> ("!" | "-") unary | call
    def unary(self):
        if self.match("BANG", "MINUS"):
            op = self.previous()
            operand = self.unary()
            return self.at(Unary(op, operand), op)
        return self.call()

    # call -> primary ("(" arguments? ")")*
    def call(self):
        expr = self.primary()
        while self.match("LEFT_PAREN"):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        args = []
        if not self.check("RIGHT_PAREN"):
            args.append(self.expression())
            while self.match("COMMA"):
                if len(args) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                args.append(self.expression())
        paren = self.eat("RIGHT_PAREN", "Expect ')' after arguments.")
        return self.at(Call(callee, paren, args), paren)

    # primary -> NUMBER | STRING | "true" | "false" | "nil" | IDENTIFIER | "(" expression ")"
    def primary(self):
        tok = self.peek()

        if self.match("TRUE"):
            return self.at(Literal(True, "TRUE"), tok)
        if self.match("FALSE"):
            return self.at(Literal(False, "FALSE"), tok)
        if self.match("NIL"):
            return self.at(Literal(None, "NIL"), tok)

        if self.match("NUMBER", "STRING"):
            return self.at(Literal(tok.literal, tok.type), tok)

        if self.match("IDENTIFIER"):
            return self.at(Variable(tok), tok)

        if self.match("LEFT_PAREN"):
            expr = self.expression()
            self.eat("RIGHT_PAREN", "Expect ')' after expression.")
            return self.at(Grouping(expr), tok)

        raise self.error(tok, "Expect expression.")
