import sys

from colorama import Fore, Style, just_fix_windows_console

MAX_SHOWN_FRAMES = 10


class LoxError(Exception):
    pass


class ParseError(LoxError):
    # Raised inside the parser only; declaration() catches it and resynchronizes.
    pass


class LoxRuntimeError(LoxError):
    def __init__(self, token, message: str, frames=None):
        super().__init__(message)
        self.token = token
        self.message = message
        self.frames = frames or []  # most recent first

    @property
    def line(self):
        return self.token.line if self.token is not None else None

    def format(self, indent: str = "") -> str:
        lines = [f"{indent}{self.message}"]
        if self.line is not None:
            lines.append(f"{indent}[line {self.line}]")
        shown = self.frames[:MAX_SHOWN_FRAMES]
        for fr in shown:
            lines.append(f"{indent}  at fn {fr['func']} (line {fr['line']})")
        if len(self.frames) > len(shown):
            lines.append(f"{indent}  ... {len(self.frames) - len(shown)} more")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()


class ErrorReporter:
    """Collects diagnostics from every phase and remembers whether any were seen.

    The driver polls had_error / had_runtime_error to pick an exit code.
    """

    def __init__(self, stream=None, color: bool | None = None):
        self.stream = stream if stream is not None else sys.stderr
        if color is None:
            isatty = getattr(self.stream, "isatty", None)
            color = bool(isatty and isatty())
        self.color = color
        self.had_error = False
        self.had_runtime_error = False
        self._colorama_inited = False

    def _ensure_colorama(self):
        if self._colorama_inited:
            return
        self._colorama_inited = True
        just_fix_windows_console()

    def _paint(self, text: str, fore: str) -> str:
        if not self.color:
            return text
        self._ensure_colorama()
        return f"{Style.BRIGHT}{fore}{text}{Style.RESET_ALL}"

    def _write(self, text: str):
        print(text, file=self.stream)

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False

    def report(self, line: int, where: str, message: str):
        prefix = self._paint(f"[line {line}] Error{where}:", Fore.RED)
        self._write(f"{prefix} {message}")
        self.had_error = True

    # lexer and resolver errors only know the line
    def error(self, line: int, message: str):
        self.report(line, "", message)

    def parse_error(self, token, message: str):
        if token.type == "EOF":
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, err: LoxRuntimeError):
        lines = err.format().split("\n")
        lines[0] = self._paint(lines[0], Fore.RED)
        for i in range(1, len(lines)):
            lines[i] = self._paint(lines[i], Fore.YELLOW)
        self._write("\n".join(lines))
        self.had_runtime_error = True
