"""
Style Rule Evaluation
Conditional styling of map entities from user-defined rules

A rule targets one customization (e.g. ``marker color``), one label and
property (``field`` = ``"Label.property"``), and a condition. The first
matching rule supplies the value; otherwise the candidate is kept.
"""
import logging
from numbers import Real
from typing import Any, Callable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# evaluate(entity, rule_category, candidate_value, rules) -> final value
StyleRuleEvaluator = Callable[[Any, str, Any, Sequence[Any]], Any]

CONDITIONS = ("=", "!=", "<", "<=", ">", ">=", "contains", "starts with", "ends with")


class StyleRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str
    condition: str = "="
    value: Any = None
    customization: str
    customization_value: Any = Field(None, alias="customizationValue")

    @property
    def label(self) -> str:
        return self.field.split(".", 1)[0]

    @property
    def property_name(self) -> Optional[str]:
        parts = self.field.split(".", 1)
        return parts[1] if len(parts) > 1 else None


def parse_rules(rules: Sequence[Any]) -> List[StyleRule]:
    """Validate raw rule dicts, skipping malformed ones. Parsed rules pass through as-is."""
    parsed: List[StyleRule] = []
    for rule in rules or []:
        if isinstance(rule, StyleRule):
            parsed.append(rule)
            continue
        try:
            parsed.append(StyleRule.model_validate(rule))
        except ValidationError as e:
            logger.warning(f"⚠️ Ignoring malformed style rule {rule!r}: {e.error_count()} errors")
    return parsed


def _coerce_like(real_value: Any, rule_value: Any) -> Any:
    if isinstance(real_value, Real) and not isinstance(real_value, bool) and isinstance(rule_value, str):
        return float(rule_value)
    return rule_value


def evaluate_condition(real_value: Any, condition: str, rule_value: Any) -> bool:
    if real_value is None:
        return False
    try:
        expected = _coerce_like(real_value, rule_value)
        if condition == "=":
            return real_value == expected
        if condition == "!=":
            return real_value != expected
        if condition == "<":
            return real_value < expected
        if condition == "<=":
            return real_value <= expected
        if condition == ">":
            return real_value > expected
        if condition == ">=":
            return real_value >= expected
        if condition == "contains":
            return str(expected) in str(real_value)
        if condition == "starts with":
            return str(real_value).startswith(str(expected))
        if condition == "ends with":
            return str(real_value).endswith(str(expected))
    except (TypeError, ValueError):
        return False
    logger.debug(f"Unknown style rule condition '{condition}'")
    return False


def evaluate_rules_on_node(node: Any, customization: str, candidate: Any, rules: Sequence[Any]) -> Any:
    """Return the customization value of the first matching rule, else ``candidate``."""
    if not rules:
        return candidate
    labels = getattr(node, "labels", None) or []
    properties: Mapping[str, Any] = getattr(node, "properties", None) or {}
    for rule in parse_rules(rules):
        if rule.customization != customization or rule.label not in labels:
            continue
        if rule.property_name is None:
            continue
        if evaluate_condition(properties.get(rule.property_name), rule.condition, rule.value):
            return rule.customization_value
    return candidate
