"""
MUST HAVE REQUIREMENTS:
- Read rule files as JSON or YAML, picked by file suffix.
- Match keys case-insensitively (Name, name and NAME are the same field).
- Register groups before tags so tags can merge them.
- Dump a registry back into the same shape so load(dump(x)) rebuilds x.
"""
# ----------------------------------
# Rule definition files
# ----------------------------------
import json
import logging
import os

import yaml

from .errors import RuleError
from .rules import AttributeGroup, AttributeRule, RuleRegistry, TagRule
from .values import ValueConstraint

logger = logging.getLogger(__name__)


def _fold(obj, where):
    if not isinstance(obj, dict):
        raise RuleError(f"{where}: expected a mapping, got {type(obj).__name__}")
    return {str(k).lower(): v for k, v in obj.items()}


def _get(d, key, kind, where, default):
    value = d.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise RuleError(f"{where}.{key}: expected {kind.__name__}, got {type(value).__name__}")
    return value


def _strings(d, key, where):
    items = _get(d, key, list, where, [])
    for item in items:
        if not isinstance(item, str):
            raise RuleError(f"{where}.{key}: expected strings, got {type(item).__name__}")
    return items


def _attribute(raw, where):
    d = _fold(raw, where)
    if "name" not in d:
        raise RuleError(f"{where}: attribute without name")
    value = d.get("value")
    if value is not None:
        v = _fold(value, f"{where}.value")
        value = ValueConstraint(
            one_of=_strings(v, "list", f"{where}.value"),
            starts_with=_get(v, "startswith", str, f"{where}.value", ""),
            regex=_get(v, "regex", str, f"{where}.value", ""),
        )
    return AttributeRule(_get(d, "name", str, where, ""), value)


def _attributes(raw, where):
    if raw is not None and not isinstance(raw, list):
        raise RuleError(f"{where}.attrs: expected list, got {type(raw).__name__}")
    return [_attribute(a, f"{where}.attrs[{i}]") for i, a in enumerate(raw or ())]


def parse_rules(data, registry=None):
    registry = registry if registry is not None else RuleRegistry()
    d = _fold(data or {}, "rules")
    for i, raw in enumerate(d.get("groups") or ()):
        g = _fold(raw, f"groups[{i}]")
        registry.register_group(AttributeGroup(g.get("name", ""), _attributes(g.get("attrs"), f"groups[{i}]")))
    for i, raw in enumerate(d.get("tags") or ()):
        t = _fold(raw, f"tags[{i}]")
        if "name" not in t:
            raise RuleError(f"tags[{i}]: tag without name")
        registry.register_tag(
            TagRule(
                name=_get(t, "name", str, f"tags[{i}]", ""),
                attributes=_attributes(t.get("attrs"), f"tags[{i}]"),
                attr_starts_with=_get(t, "attrstartswith", str, f"tags[{i}]", ""),
                attr_regex=_get(t, "attrregex", str, f"tags[{i}]", ""),
                groups=_strings(t, "groups", f"tags[{i}]"),
                self_closing=_get(t, "isselfclosing", bool, f"tags[{i}]", False),
            )
        )
    return registry


def load_rules(path, registry=None):
    ext = os.path.splitext(str(path))[1].lower()
    if ext not in (".json", ".yml", ".yaml"):
        raise RuleError(f"unsupported rule file type: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f) if ext == ".json" else yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise RuleError(f"{path}: {exc}") from exc
    registry = parse_rules(data, registry)
    logger.info("loaded %d tags and %d groups from %s", len(registry.tags), len(registry.groups), path)
    return registry


# ----------------------------------
# Dumping
# ----------------------------------
def _dump_attribute(a):
    out = {"name": a.name}
    if a.value is not None:
        v = {}
        if a.value.one_of:
            v["list"] = sorted(a.value.one_of)
        if a.value.starts_with:
            v["startsWith"] = a.value.starts_with
        if a.value.regex:
            v["regex"] = a.value.regex
        out["value"] = v
    return out


def _dump_tag(t):
    out = {"name": t.name, "attrs": [_dump_attribute(a) for a in t.attributes]}
    if t.attr_starts_with:
        out["attrStartsWith"] = t.attr_starts_with
    if t.attr_regex:
        out["attrRegex"] = t.attr_regex
    if t.groups:
        out["groups"] = list(t.groups)
    if t.self_closing:
        out["isSelfClosing"] = True
    return out


def dump_rules(registry):
    tags = list(registry.tags)
    if registry.global_rule is not None:
        tags.insert(0, registry.global_rule)
    return {
        "groups": [{"name": g.name, "attrs": [_dump_attribute(a) for a in g.attributes]} for g in registry.groups],
        "tags": [_dump_tag(t) for t in tags],
    }


def save_rules(registry, path):
    data = dump_rules(registry)
    ext = os.path.splitext(str(path))[1].lower()
    with open(path, "w", encoding="utf-8") as f:
        if ext in (".yml", ".yaml"):
            yaml.safe_dump(data, f, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
