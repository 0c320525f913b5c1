import os
import subprocess
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
CLI = os.path.join(ROOT, "cli.py")


def run_repl_with_input(inp: str) -> subprocess.CompletedProcess:
    proc = subprocess.run(
        [sys.executable, CLI, "--no-color", "repl"],
        input=inp,
        text=True,
        capture_output=True,
        cwd=ROOT,
        timeout=10,
    )

    # REPL should exit cleanly after :q
    if proc.returncode != 0:
        raise AssertionError(f"REPL exited with code {proc.returncode}\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}")

    return proc


def test_auto_print_expression():
    out = run_repl_with_input("1 + 2\n:q\n").stdout
    if "3" not in out:
        raise AssertionError(f"Expected 3 in output.\nOUT:\n{out}")


def test_persistent_state_expression():
    out = run_repl_with_input("var x = 2;\nx + 5\n:q\n").stdout
    if "7" not in out:
        raise AssertionError(f"Expected 7 in output.\nOUT:\n{out}")


def test_multiline_block():
    proc = run_repl_with_input("fun sq(n) {\n  return n * n;\n}\nprint sq(9);\n:q\n")
    if "81" not in proc.stdout:
        raise AssertionError(f"Expected 81 in output.\nOUT:\n{proc.stdout}\nERR:\n{proc.stderr}")


def test_errors_do_not_end_session():
    proc = run_repl_with_input("print nope;\n1 +;\nprint \"still here\";\n:q\n")
    if "Undefined variable 'nope'." not in proc.stderr:
        raise AssertionError(f"Expected runtime error.\nERR:\n{proc.stderr}")
    if "Expect expression." not in proc.stderr:
        raise AssertionError(f"Expected parse error.\nERR:\n{proc.stderr}")
    if "still here" not in proc.stdout:
        raise AssertionError(f"Expected session to continue.\nOUT:\n{proc.stdout}")


def test_invalid_assignment_is_reported_not_echoed():
    proc = run_repl_with_input("1 = 2\nprint \"after\";\n:q\n")
    if "Invalid assignment target." not in proc.stderr:
        raise AssertionError(f"Expected assignment error.\nERR:\n{proc.stderr}")
    if "2" in proc.stdout:
        raise AssertionError(f"Bad assignment should not echo a value.\nOUT:\n{proc.stdout}")
    if "after" not in proc.stdout:
        raise AssertionError(f"Expected session to continue.\nOUT:\n{proc.stdout}")


if __name__ == "__main__":
    test_auto_print_expression()
    test_persistent_state_expression()
    test_multiline_block()
    test_errors_do_not_end_session()
    test_invalid_assignment_is_reported_not_echoed()
    print("ok")
