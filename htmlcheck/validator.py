"""
MUST HAVE REQUIREMENTS:
- Per token: check the tag, then nesting, then each attribute in encounter order.
- Report duplicate attributes whether or not the attribute itself is valid.
- Pass every violation through the callback; None drops it, anything else replaces it.
- With stop_after_first_error, return as soon as one error survives the callback.
- Stop the scan on EOF and report tags left open.
- Give each run its own stack and error list; the registry is only read.
"""
# ----------------------------------
# Token loop
# ----------------------------------
import logging

from lxml import etree

from .errors import Reason, Violation, ViolationList
from .nesting import NestingMatcher
from .rules import RuleRegistry
from .tokens import TokenKind, tokenize, tokens_from_tree

logger = logging.getLogger(__name__)

TAG_KINDS = (TokenKind.START, TokenKind.END, TokenKind.SELF_CLOSING)


class StopScan(Exception):
    pass


class ValidationSession:
    def __init__(self, validator):
        self.rules = validator.rules
        self.callback = validator.callback
        self.stop_after_first_error = validator.stop_after_first_error
        self.nesting = NestingMatcher(self.rules.is_self_closing)
        self.errors = ViolationList()

    def run(self, tokens):
        try:
            for token in tokens:
                if token.kind is TokenKind.EOF:
                    break
                self.check_token(token)
            for reason, tag in self.nesting.finish():
                self.report(Violation(reason, tag))
        except StopScan:
            pass
        return self.errors

    def check_token(self, token):
        if token.kind not in TAG_KINDS:
            return
        where = dict(line=token.line, column=token.column)
        name = token.name
        known = self.rules.is_valid_tag(name)
        if not known:
            self.report(Violation(Reason.UNKNOWN_TAG, name, **where))
        else:
            if token.kind is TokenKind.START:
                self.nesting.open(name)
            elif token.kind is TokenKind.END:
                for reason, tag in self.nesting.close(name):
                    self.report(Violation(reason, tag, **where))

        seen = set()
        for attr, value in token.attrs:
            self.check_attribute(name, attr, value, where)
            if attr in seen:
                self.report(Violation(Reason.DUPLICATE_ATTRIBUTE, name, attr, value, **where))
            seen.add(attr)

    def check_attribute(self, tag, attr, value, where):
        rule = self.rules.resolve_attribute(tag, attr)
        if rule is None:
            self.report(Violation(Reason.UNKNOWN_ATTRIBUTE, tag, attr, value, **where))
        elif rule.value is not None and not rule.value.matches(value):
            self.report(Violation(Reason.INVALID_ATTRIBUTE_VALUE, tag, attr, value, **where))

    def report(self, violation):
        err = violation
        if self.callback is not None:
            err = self.callback(
                violation.tag_name, violation.attribute_name, violation.attribute_value, violation.reason
            )
            if err is None:
                logger.debug("callback suppressed %s", violation)
                return
            if not isinstance(err, Exception):
                raise TypeError(f"error callback must return an exception or None, got {type(err).__name__}")
        self.errors.append(err)
        if self.stop_after_first_error:
            raise StopScan


# ----------------------------------
# Public entry point
# ----------------------------------
class Validator:
    def __init__(self, rules=None, stop_after_first_error=False, callback=None):
        self.rules = rules if rules is not None else RuleRegistry()
        self.stop_after_first_error = stop_after_first_error
        self.callback = callback

    def register_callback(self, callback):
        self.callback = callback

    def validate(self, tokens):
        return ValidationSession(self).run(tokens)

    def validate_string(self, text):
        return self.validate(tokenize(text))

    def validate_file(self, path_or_file):
        if hasattr(path_or_file, "read"):
            return self.validate(tokenize(path_or_file))
        with open(path_or_file, encoding="utf-8", errors="replace") as f:
            return self.validate(tokenize(f))

    def validate_tree(self, root):
        return self.validate(tokens_from_tree(root))

    def validate_document(self, data):
        """Parse bytes or text with lxml's HTML parser first, then validate the tree.

        The parser repairs nesting, so only tag and attribute rules can fail here."""
        root = etree.HTML(data) if data.strip() else None
        if root is None:
            return ViolationList()
        return self.validate_tree(root)
