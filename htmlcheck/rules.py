"""
MUST HAVE REQUIREMENTS:
- Keep one rule per tag name; registering a name again replaces its attributes entirely.
- Merge group attributes into a tag when the tag is registered, and into already
  registered tags when the group is registered later.
- Keep the global rule (empty name) apart from the tags; it adds attributes to every tag.
- Resolve attributes in order: tag attributes, tag wildcard, global attributes, global wildcard.
- Refuse registration once the registry is frozen.
"""
# ----------------------------------
# Whitelist rules and their resolution
# ----------------------------------
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import RuleError
from .values import ValueConstraint, compile_pattern, name_matches

logger = logging.getLogger(__name__)

GLOBAL = ""


@dataclass(frozen=True)
class AttributeRule:
    name: str
    value: Optional[ValueConstraint] = None


@dataclass(frozen=True)
class AttributeGroup:
    name: str
    attributes: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(self.attributes))


@dataclass(frozen=True)
class TagRule:
    name: str
    attributes: tuple = ()
    attr_starts_with: str = ""
    attr_regex: str = ""
    groups: tuple = ()
    self_closing: bool = False

    def __post_init__(self):
        # stored as tuples so a registered rule cannot change underneath the registry
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "groups", tuple(self.groups))


class _Resolved:
    """Effective view of one TagRule: own attributes plus merged groups."""

    def __init__(self, rule):
        self.rule = rule
        self.attributes = {a.name: a for a in rule.attributes}
        self.pattern = compile_pattern(rule.attr_regex) if rule.attr_regex else None

    def lookup(self, attr_name):
        if attr_name in self.attributes:
            return self.attributes[attr_name]
        if name_matches(attr_name, self.rule.attr_starts_with, self.pattern):
            return AttributeRule(attr_name)
        return None


class RuleRegistry:
    def __init__(self):
        self._tags = {}
        self._groups = {}
        self._global = None
        self.frozen = False

    # ----------------------------------
    # Building
    # ----------------------------------
    def register_group(self, group):
        self._check_open()
        self._groups[group.name] = group
        for resolved in self._all_resolved():
            if group.name in resolved.rule.groups:
                logger.debug("merging group %r into tag %r", group.name, resolved.rule.name)
                for attr in group.attributes:
                    resolved.attributes[attr.name] = attr

    def register_groups(self, groups):
        for group in groups:
            self.register_group(group)

    def register_tag(self, rule):
        self._check_open()
        resolved = _Resolved(rule)
        for group_name in rule.groups:
            group = self._groups.get(group_name)
            if group is None:
                logger.debug("tag %r references unknown group %r", rule.name, group_name)
                continue
            for attr in group.attributes:
                resolved.attributes[attr.name] = attr
        if rule.name == GLOBAL:
            if self._global is not None:
                logger.warning("second global tag rule replaces the first")
            self._global = resolved
        else:
            self._tags[rule.name] = resolved

    def register_tags(self, rules):
        for rule in rules:
            self.register_tag(rule)

    def freeze(self):
        self.frozen = True
        return self

    def _check_open(self):
        if self.frozen:
            raise RuleError("rule registry is frozen")

    def _all_resolved(self):
        yield from self._tags.values()
        if self._global is not None:
            yield self._global

    # ----------------------------------
    # Queries
    # ----------------------------------
    @property
    def global_rule(self):
        return self._global.rule if self._global is not None else None

    @property
    def tags(self):
        return [r.rule for r in self._tags.values()]

    @property
    def groups(self):
        return list(self._groups.values())

    def is_valid_tag(self, name):
        return name in self._tags

    def is_self_closing(self, name):
        resolved = self._tags.get(name)
        return resolved is not None and resolved.rule.self_closing

    def resolve_attribute(self, tag_name, attr_name):
        resolved = self._tags.get(tag_name)
        if resolved is not None:
            found = resolved.lookup(attr_name)
            if found is not None:
                return found
        if self._global is not None:
            return self._global.lookup(attr_name)
        return None
