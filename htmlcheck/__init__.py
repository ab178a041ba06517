from .errors import ErrorDetails, Reason, RuleError, Violation, ViolationList
from .loader import dump_rules, load_rules, parse_rules, save_rules
from .rules import AttributeGroup, AttributeRule, RuleRegistry, TagRule
from .tokens import Token, TokenKind, tokenize, tokens_from_tree
from .validator import ValidationSession, Validator
from .values import ValueConstraint

__all__ = [
    "AttributeGroup",
    "AttributeRule",
    "ErrorDetails",
    "Reason",
    "RuleError",
    "RuleRegistry",
    "TagRule",
    "Token",
    "TokenKind",
    "ValidationSession",
    "Validator",
    "ValueConstraint",
    "Violation",
    "ViolationList",
    "dump_rules",
    "load_rules",
    "parse_rules",
    "save_rules",
    "tokenize",
    "tokens_from_tree",
]
