import io
import sys
import traceback

from ast_nodes import PrintStmt
from errors import ErrorReporter
from interpreter import Interpreter
from lexer import Lexer
from parser import Parser
from resolver import Resolver

EXIT_USAGE = 64
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70


# Simple AST printer (so you can SEE what the parser built)
def ast_to_dict(node):
    if node is None:
        return None

    t = node.__class__.__name__
    d = {"type": t}

    if t == "Literal":
        d["value"] = node.value
        d["kind"] = node.kind
    elif t == "Variable":
        d["name"] = node.name.lexeme
    elif t == "Assign":
        d["name"] = node.name.lexeme
        d["value"] = ast_to_dict(node.value)
    elif t in ("Binary", "Logical"):
        d["op"] = node.op.lexeme
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif t == "Unary":
        d["op"] = node.op.lexeme
        d["operand"] = ast_to_dict(node.operand)
    elif t == "Grouping":
        d["inner"] = ast_to_dict(node.inner)
    elif t == "Call":
        d["callee"] = ast_to_dict(node.callee)
        d["args"] = [ast_to_dict(a) for a in node.args]
    elif t in ("ExprStmt", "PrintStmt"):
        d["expr"] = ast_to_dict(node.expr)
    elif t == "VarDeclStmt":
        d["name"] = node.name.lexeme
        d["initializer"] = ast_to_dict(node.initializer)
    elif t == "BlockStmt":
        d["statements"] = [ast_to_dict(s) for s in node.statements]
    elif t == "IfStmt":
        d["condition"] = ast_to_dict(node.condition)
        d["then_branch"] = ast_to_dict(node.then_branch)
        d["else_branch"] = ast_to_dict(node.else_branch)
    elif t == "WhileStmt":
        d["condition"] = ast_to_dict(node.condition)
        d["body"] = ast_to_dict(node.body)
    elif t == "FunDeclStmt":
        d["name"] = node.name.lexeme
        d["params"] = [p.lexeme for p in node.params]
        d["body"] = [ast_to_dict(s) for s in node.body]
    elif t == "ReturnStmt":
        d["value"] = ast_to_dict(node.value)
    else:
        d["raw"] = str(node)

    return d


def pretty(obj, indent=0):
    sp = "  " * indent
    if isinstance(obj, dict):
        lines = []
        for k, v in obj.items():
            if isinstance(v, (dict, list)) and v:
                lines.append(f"{sp}{k}:")
                lines.append(pretty(v, indent + 1))
            else:
                lines.append(f"{sp}{k}: {v}")
        return "\n".join(lines)
    if isinstance(obj, list):
        lines = []
        for item in obj:
            lines.append(f"{sp}-")
            lines.append(pretty(item, indent + 1))
        return "\n".join(lines)
    return f"{sp}{obj}"


def run(source, interpreter, reporter):
    """Lex, parse, resolve and execute one unit of source against interpreter.

    Nothing executes if any lexical, parse or resolve error was reported.
    """
    tokens = Lexer(source, reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()
    if reporter.had_error:
        return

    Resolver(interpreter, reporter).resolve(statements)
    if reporter.had_error:
        return

    interpreter.interpret(statements)


def read_source(path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        print(f"Cannot read {path}: {e.strerror}", file=sys.stderr)
        sys.exit(EXIT_NOINPUT)


def cmd_tokens(path, color=None):
    code = read_source(path)
    reporter = ErrorReporter(color=color)
    for tok in Lexer(code, reporter).scan_tokens():
        literal = "" if tok.literal is None else f"  {tok.literal!r}"
        print(f"  {tok.line:4d}  {tok.type:<14} {tok.lexeme!r}{literal}")
    if reporter.had_error:
        sys.exit(EXIT_DATAERR)


def cmd_parse(path, color=None):
    code = read_source(path)
    reporter = ErrorReporter(color=color)

    tokens = Lexer(code, reporter).scan_tokens()
    statements = Parser(tokens, reporter).parse()
    if reporter.had_error:
        sys.exit(EXIT_DATAERR)

    print(pretty([ast_to_dict(s) for s in statements]))


def cmd_run(path, debug: bool = False, color=None):
    code = read_source(path)
    reporter = ErrorReporter(color=color)
    try:
        interpreter = Interpreter(reporter)
        run(code, interpreter, reporter)
    except Exception as e:
        if debug:
            traceback.print_exc()
        else:
            print(f"Internal error: {e}", file=sys.stderr)
        sys.exit(EXIT_SOFTWARE)

    if reporter.had_error:
        sys.exit(EXIT_DATAERR)
    if reporter.had_runtime_error:
        sys.exit(EXIT_SOFTWARE)


def _count_braces_delta(line: str) -> int:
    # Minimal brace balancer for REPL multiline input.
    # Ignores braces inside "..." strings and after // comments.
    delta = 0
    in_string = False
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "/" and not in_string and line[i + 1:i + 2] == "/":
            break
        if ch == '"':
            in_string = not in_string
        elif not in_string:
            if ch == "{":
                delta += 1
            elif ch == "}":
                delta -= 1
        i += 1
    return delta


def compile_snippet(source, reporter):
    # Parse as a program first; if that fails, retry as one bare expression to echo.
    scratch = ErrorReporter(stream=io.StringIO(), color=reporter.color)
    tokens = Lexer(source, scratch).scan_tokens()
    if not scratch.had_error:
        statements = Parser(tokens, scratch).parse()
        if not scratch.had_error:
            return statements

        expr_reporter = ErrorReporter(stream=io.StringIO(), color=reporter.color)
        expr = Parser(tokens, expr_reporter).parse_expression()
        if expr is not None and not expr_reporter.had_error:
            node = PrintStmt(expr)
            node.line = expr.line
            return [node]
        if expr is not None:
            # a whole expression with its own errors, e.g. `1 = 2`
            scratch = expr_reporter

    reporter.stream.write(scratch.stream.getvalue())
    reporter.had_error = True
    return None


def cmd_repl(debug: bool = False, color=None):
    reporter = ErrorReporter(color=color)
    interpreter = Interpreter(reporter)

    print("pylox REPL. Type :q to quit.")

    buffer_lines = []
    brace_depth = 0
    while True:
        prompt = "> " if not buffer_lines else "... "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            break

        stripped = line.strip()
        if not buffer_lines and stripped in (":q", ":quit", "quit", "exit"):
            break

        if not stripped and brace_depth == 0 and not buffer_lines:
            continue

        buffer_lines.append(line)
        brace_depth += _count_braces_delta(line)

        # Wait for block completion if braces aren't balanced yet.
        if brace_depth > 0:
            continue

        source = "\n".join(buffer_lines) + "\n"
        buffer_lines = []
        brace_depth = 0

        try:
            statements = compile_snippet(source, reporter)
            if statements is not None:
                Resolver(interpreter, reporter).resolve(statements)
                if not reporter.had_error:
                    interpreter.interpret(statements)
        except Exception as e:
            if debug:
                traceback.print_exc()
            else:
                print(f"Internal error: {e}", file=sys.stderr)
        finally:
            # one bad line must not poison the rest of the session
            reporter.reset()


def usage():
    print("Usage:")
    print("  pylox run <file.lox>")
    print("  pylox parse <file.lox>")
    print("  pylox tokens <file.lox>")
    print("  pylox repl")
    print("  (optional) --debug to show Python traceback, --no-color to disable colors")
    sys.exit(EXIT_USAGE)


def main():
    debug = False
    if "--debug" in sys.argv:
        debug = True
        sys.argv.remove("--debug")

    color = None
    if "--no-color" in sys.argv:
        color = False
        sys.argv.remove("--no-color")

    if len(sys.argv) < 2:
        usage()

    cmd = sys.argv[1]

    if cmd == "repl":
        if len(sys.argv) != 2:
            usage()
        cmd_repl(debug=debug, color=color)
        return

    if len(sys.argv) != 3:
        usage()

    path = sys.argv[2]

    if cmd == "run":
        cmd_run(path, debug=debug, color=color)
    elif cmd == "parse":
        cmd_parse(path, color=color)
    elif cmd == "tokens":
        cmd_tokens(path, color=color)
    else:
        print(f"Unknown command: {cmd}")
        usage()


if __name__ == "__main__":
    main()
