from .style_rules import StyleRule, StyleRuleEvaluator, evaluate_rules_on_node

__all__ = ["StyleRule", "StyleRuleEvaluator", "evaluate_rules_on_node"]
