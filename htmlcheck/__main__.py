"""
MUST HAVE REQUIREMENTS:
- Take a rule file and any number of HTML paths; read stdin when no path is given.
- Print one line per violation as path:line:column: message.
- Exit 1 when any file has violations, otherwise print a success line.
- --first stops each file at its first violation; -v turns on debug logging.
"""
# ----------------------------------
# Command line entry point
# ----------------------------------
import argparse
import io
import logging
import sys

from .errors import RuleError
from .loader import load_rules
from .validator import Validator


def location(path, err):
    line = getattr(err, "line", None)
    if line is None:
        return path
    column = getattr(err, "column", None)
    return f"{path}:{line}:{column}" if column is not None else f"{path}:{line}"


def main(argv=None):
    ap = argparse.ArgumentParser(prog="htmlcheck", description="Validate HTML against a tag whitelist.")
    ap.add_argument("rules", help="JSON or YAML rule file")
    ap.add_argument("html", nargs="*", help="HTML files (stdin when omitted)")
    ap.add_argument("--first", action="store_true", help="stop each file at its first violation")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        rules = load_rules(args.rules).freeze()
    except (OSError, RuleError) as exc:
        print(f"cannot load rules: {exc}")
        return 2

    v = Validator(rules, stop_after_first_error=args.first)
    bad = 0
    for path in args.html or ["-"]:
        if path == "-":
            errors = v.validate_file(io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace"))
        else:
            errors = v.validate_file(path)
        for err in errors:
            print(f"{location(path, err)}: {err}")
        bad += len(errors)
    if bad:
        return 1
    print("html rules satisfied")
    return 0


if __name__ == "__main__":
    sys.exit(main())
