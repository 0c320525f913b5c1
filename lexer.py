class Token:
    def __init__(self, type, lexeme, literal=None, line=1):
        self.type = type
        self.lexeme = lexeme
        self.literal = literal
        self.line = line

    def __repr__(self):
        if self.literal is not None:
            return f"{self.type}({self.literal!r})"
        if self.type == "IDENTIFIER":
            return f"{self.type}({self.lexeme})"
        return f"{self.type}"


KEYWORDS = {
    "and": "AND",
    "class": "CLASS",
    "else": "ELSE",
    "false": "FALSE",
    "for": "FOR",
    "fun": "FUN",
    "if": "IF",
    "nil": "NIL",
    "or": "OR",
    "print": "PRINT",
    "return": "RETURN",
    "super": "SUPER",
    "this": "THIS",
    "true": "TRUE",
    "var": "VAR",
    "while": "WHILE",
}

SINGLE_CHAR_TOKENS = {
    "(": "LEFT_PAREN",
    ")": "RIGHT_PAREN",
    "{": "LEFT_BRACE",
    "}": "RIGHT_BRACE",
    ",": "COMMA",
    ".": "DOT",
    "-": "MINUS",
    "+": "PLUS",
    ";": "SEMICOLON",
    "*": "STAR",
}

# char -> (type when followed by '=', type otherwise)
ONE_OR_TWO_CHAR_TOKENS = {
    "!": ("BANG_EQUAL", "BANG"),
    "=": ("EQUAL_EQUAL", "EQUAL"),
    "<": ("LESS_EQUAL", "LESS"),
    ">": ("GREATER_EQUAL", "GREATER"),
}


def is_digit(ch):
    return ch is not None and "0" <= ch <= "9"


def is_alpha(ch):
    return ch is not None and ("a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_")


def is_alnum(ch):
    return is_digit(ch) or is_alpha(ch)


class Lexer:
    def __init__(self, text, reporter):
        self.text = text
        self.reporter = reporter
        self.tokens = []
        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char about to be consumed
        self.line = 1

    def is_at_end(self):
        return self.current >= len(self.text)

    def advance(self):
        ch = self.text[self.current]
        self.current += 1
        return ch

    def peek(self):
        if self.is_at_end():
            return None
        return self.text[self.current]

    def peek_next(self):
        nxt = self.current + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    def match(self, expected):
        if self.peek() != expected:
            return False
        self.current += 1
        return True

    def lexeme(self):
        return self.text[self.start:self.current]

    def add_token(self, type, literal=None):
        self.tokens.append(Token(type, self.lexeme(), literal, self.line))

    # ---------- TOP LEVEL ----------
    def scan_tokens(self):
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token("EOF", "", None, self.line))
        return self.tokens

    def scan_token(self):
        ch = self.advance()

        if ch in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[ch])
            return

        if ch in ONE_OR_TWO_CHAR_TOKENS:
            two, one = ONE_OR_TWO_CHAR_TOKENS[ch]
            self.add_token(two if self.match("=") else one)
            return

        if ch == "/":
            if self.match("/"):
                self.skip_comment()
            else:
                self.add_token("SLASH")
            return

        if ch in " \r\t":
            return

        if ch == "\n":
            self.line += 1
            return

        if ch == '"':
            self.read_string()
            return

        if is_digit(ch):
            self.read_number()
            return

        if is_alpha(ch):
            self.read_identifier()
            return

        self.reporter.error(self.line, f"Unexpected character: {ch}.")

    # ---------- LEXEME READERS ----------
    def skip_comment(self):
        while self.peek() is not None and self.peek() != "\n":
            self.advance()

    def read_string(self):
        while self.peek() is not None and self.peek() != '"':
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.reporter.error(self.line, "Unterminated string.")
            return

        self.advance()  # closing quote
        # no escape processing: the literal is the raw text between the quotes
        self.add_token("STRING", self.text[self.start + 1:self.current - 1])

    def read_number(self):
        while is_digit(self.peek()):
            self.advance()

        # a fractional part needs at least one digit after the dot
        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token("NUMBER", float(self.lexeme()))

    def read_identifier(self):
        while is_alnum(self.peek()):
            self.advance()
        self.add_token(KEYWORDS.get(self.lexeme(), "IDENTIFIER"))
