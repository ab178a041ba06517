"""
MUST HAVE REQUIREMENTS:
- One closed set of reasons; consumers switch on the reason, not on the class.
- Every violation exposes tag, attribute and value (empty string when unused).
- A violation list combines into one failure that keeps every cause.
- END_OF_INPUT only ends the scan and is never reported.
"""
# ----------------------------------
# Violation records
# ----------------------------------
import enum
from dataclasses import dataclass


class Reason(enum.Enum):
    UNKNOWN_TAG = 0
    UNKNOWN_ATTRIBUTE = 1
    CLOSED_BEFORE_OPENED = 2
    NOT_PROPERLY_CLOSED = 3
    DUPLICATE_ATTRIBUTE = 4
    END_OF_INPUT = 5
    INVALID_ATTRIBUTE_VALUE = 6


messages = {
    Reason.UNKNOWN_TAG: "invalid tag '{tag}'",
    Reason.UNKNOWN_ATTRIBUTE: "invalid attribute '{attr}' in tag '{tag}'",
    Reason.INVALID_ATTRIBUTE_VALUE: "invalid attribute value '{value}' in attribute '{attr}' in tag '{tag}'",
    Reason.DUPLICATE_ATTRIBUTE: "duplicate attribute '{attr}' in tag '{tag}'",
    Reason.CLOSED_BEFORE_OPENED: "tag '{tag}' closed before opened",
    Reason.NOT_PROPERLY_CLOSED: "tag '{tag}' is never closed",
    Reason.END_OF_INPUT: "end of input",
}


class RuleError(ValueError):
    """Raised for broken rule definitions, never for markup problems."""


@dataclass(frozen=True)
class ErrorDetails:
    reason: Reason
    tag_name: str = ""
    attribute_name: str = ""
    attribute_value: str = ""


class Violation(Exception):
    def __init__(self, reason, tag_name="", attribute_name="", attribute_value="", line=None, column=None):
        self.reason = reason
        self.tag_name = tag_name
        self.attribute_name = attribute_name
        self.attribute_value = attribute_value
        self.line = line
        self.column = column
        super().__init__(self.message())

    def message(self):
        return messages[self.reason].format(
            tag=self.tag_name, attr=self.attribute_name, value=self.attribute_value
        )

    def details(self):
        return ErrorDetails(self.reason, self.tag_name, self.attribute_name, self.attribute_value)

    def __eq__(self, other):
        if not isinstance(other, Violation):
            return NotImplemented
        return self.details() == other.details()

    def __hash__(self):
        return hash(self.details())

    def __repr__(self):
        return f"Violation({self.reason.name}, {self.message()!r})"


# ----------------------------------
# Aggregation
# ----------------------------------
class ViolationList(list):
    """Errors in detection order. Entries are usually Violations but a callback may
    have replaced some with arbitrary exceptions."""

    def join(self):
        if not self:
            return None
        return ExceptionGroup(f"{len(self)} html validation error(s)", list(self))

    def by_reason(self, reason):
        return [e for e in self if isinstance(e, Violation) and e.reason is reason]

    def reasons(self):
        return [e.reason if isinstance(e, Violation) else None for e in self]
