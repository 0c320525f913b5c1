import io

from errors import ErrorReporter
from lexer import Lexer


def scan(source):
    err = io.StringIO()
    reporter = ErrorReporter(stream=err)
    tokens = Lexer(source, reporter).scan_tokens()
    return tokens, reporter, err.getvalue()


def types(tokens):
    return [t.type for t in tokens]


def test_single_and_double_char_tokens():
    tokens, reporter, _ = scan("(){},.-+;* ! != = == < <= > >= /")
    assert not reporter.had_error
    assert types(tokens) == [
        "LEFT_PAREN", "RIGHT_PAREN", "LEFT_BRACE", "RIGHT_BRACE", "COMMA", "DOT",
        "MINUS", "PLUS", "SEMICOLON", "STAR",
        "BANG", "BANG_EQUAL", "EQUAL", "EQUAL_EQUAL",
        "LESS", "LESS_EQUAL", "GREATER", "GREATER_EQUAL", "SLASH", "EOF",
    ]


def test_two_char_tokens_are_greedy():
    tokens, _, _ = scan("!==")
    assert types(tokens) == ["BANG_EQUAL", "EQUAL", "EOF"]


def test_empty_source_is_just_eof():
    tokens, reporter, _ = scan("")
    assert types(tokens) == ["EOF"]
    assert tokens[0].line == 1
    assert not reporter.had_error


def test_comments_and_whitespace_emit_nothing():
    tokens, _, _ = scan("// a comment ( ) {\n\t1 / 2 \r\n// trailing")
    assert types(tokens) == ["NUMBER", "SLASH", "NUMBER", "EOF"]
    assert tokens[0].line == 2
    assert tokens[-1].line == 3


def test_numbers():
    tokens, _, _ = scan("123 45.67 0")
    assert types(tokens) == ["NUMBER", "NUMBER", "NUMBER", "EOF"]
    assert [t.literal for t in tokens[:3]] == [123.0, 45.67, 0.0]
    assert tokens[1].lexeme == "45.67"


def test_number_dot_edges():
    tokens, _, _ = scan("1.")
    assert types(tokens) == ["NUMBER", "DOT", "EOF"]
    assert tokens[0].literal == 1.0

    tokens, _, _ = scan(".5")
    assert types(tokens) == ["DOT", "NUMBER", "EOF"]


def test_string_literal_is_raw():
    tokens, reporter, _ = scan('"hi\\n there"')
    assert not reporter.had_error
    assert tokens[0].type == "STRING"
    assert tokens[0].literal == "hi\\n there"
    assert tokens[0].lexeme == '"hi\\n there"'


def test_multiline_string_counts_lines():
    tokens, _, _ = scan('"a\nb"\nx')
    assert tokens[0].literal == "a\nb"
    assert tokens[1].type == "IDENTIFIER"
    assert tokens[1].line == 3


def test_unterminated_string():
    tokens, reporter, err = scan('print "oops')
    assert reporter.had_error
    assert types(tokens) == ["PRINT", "EOF"]
    assert "[line 1] Error: Unterminated string." in err


def test_keywords_and_identifiers():
    tokens, _, _ = scan("and class else false for fun if nil or print return super this true var while")
    assert types(tokens)[:-1] == [
        "AND", "CLASS", "ELSE", "FALSE", "FOR", "FUN", "IF", "NIL", "OR",
        "PRINT", "RETURN", "SUPER", "THIS", "TRUE", "VAR", "WHILE",
    ]

    tokens, _, _ = scan("varx _foo And f00 VAR")
    assert types(tokens) == ["IDENTIFIER"] * 5 + ["EOF"]
    assert [t.lexeme for t in tokens[:5]] == ["varx", "_foo", "And", "f00", "VAR"]
    assert all(t.literal is None for t in tokens)


def test_unexpected_character_keeps_scanning():
    tokens, reporter, err = scan("1 @ 2\n#")
    assert reporter.had_error
    assert types(tokens) == ["NUMBER", "NUMBER", "EOF"]
    assert "[line 1] Error: Unexpected character: @." in err
    assert "[line 2] Error: Unexpected character: #." in err


def test_lines_are_tracked():
    tokens, _, _ = scan("var a = 1;\n\nprint a;")
    lines = [(t.type, t.line) for t in tokens]
    assert lines[0] == ("VAR", 1)
    assert ("PRINT", 3) in lines


if __name__ == "__main__":
    test_single_and_double_char_tokens()
    test_two_char_tokens_are_greedy()
    test_empty_source_is_just_eof()
    test_comments_and_whitespace_emit_nothing()
    test_numbers()
    test_number_dot_edges()
    test_string_literal_is_raw()
    test_multiline_string_counts_lines()
    test_unterminated_string()
    test_keywords_and_identifiers()
    test_unexpected_character_keeps_scanning()
    test_lines_are_tracked()
    print("ok")
