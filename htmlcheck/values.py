"""
MUST HAVE REQUIREMENTS:
- Accept a value when it is in the exact list, starts with the prefix, or matches the regex.
- Check the forms in that order and stop at the first match.
- Treat an empty prefix or regex as absent.
- Search the regex unanchored; compile it up front and fail loud when it is malformed.
"""
# ----------------------------------
# Attribute value constraints
# ----------------------------------
import re

from .errors import RuleError


class ValueConstraint:
    def __init__(self, one_of=(), starts_with="", regex=""):
        if isinstance(one_of, str):
            raise RuleError(f"value list must be a list of strings, got {one_of!r}")
        self.one_of = frozenset(one_of)
        self.starts_with = starts_with or ""
        self.regex = regex or ""
        self.pattern = compile_pattern(self.regex) if self.regex else None

    def __setattr__(self, name, value):
        if "pattern" in self.__dict__:
            raise AttributeError("ValueConstraint is read-only")
        super().__setattr__(name, value)

    def matches(self, value):
        if value in self.one_of:
            return True
        if self.starts_with and value.startswith(self.starts_with):
            return True
        if self.pattern is not None and self.pattern.search(value):
            return True
        return False

    def __eq__(self, other):
        if not isinstance(other, ValueConstraint):
            return NotImplemented
        return (self.one_of, self.starts_with, self.regex) == (other.one_of, other.starts_with, other.regex)

    def __hash__(self):
        return hash((self.one_of, self.starts_with, self.regex))

    def __repr__(self):
        return f"ValueConstraint(one_of={sorted(self.one_of)!r}, starts_with={self.starts_with!r}, regex={self.regex!r})"


def compile_pattern(regex):
    try:
        return re.compile(regex)
    except re.error as exc:
        raise RuleError(f"invalid regex {regex!r}: {exc}") from exc


def name_matches(name, starts_with="", pattern=None):
    # wildcard attribute names share the value semantics: prefix first, then regex
    if starts_with and name.startswith(starts_with):
        return True
    return pattern is not None and pattern.search(name) is not None
