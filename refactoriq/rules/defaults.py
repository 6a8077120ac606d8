"""Default rule set registration."""
from __future__ import annotations

from refactoriq.rules.base_rule import BaseRule
from refactoriq.rules.glide_api_rules import DeprecatedGlideAjaxRule, LogInsteadOfErrorRule
from refactoriq.rules.glide_performance_rules import HardcodedValuesRule
from refactoriq.rules.glide_query_rules import NestedQueryRule, QueryWithoutConditionsRule
from refactoriq.rules.registry import RuleRegistry
from refactoriq.rules.ts_module_rules import UnusedImportsRule
from refactoriq.rules.ts_performance_rules import LargeLoopsRule
from refactoriq.rules.ts_type_rules import MissingTypeDefinitionsRule, NoAnyTypeRule

__all__ = ["default_rules", "build_default_registry"]


def default_rules() -> list[BaseRule]:
    return [
        NestedQueryRule(),
        QueryWithoutConditionsRule(),
        DeprecatedGlideAjaxRule(),
        LogInsteadOfErrorRule(),
        HardcodedValuesRule(),
        NoAnyTypeRule(),
        MissingTypeDefinitionsRule(),
        UnusedImportsRule(),
        LargeLoopsRule(),
    ]


def build_default_registry() -> RuleRegistry:
    registry = RuleRegistry()
    for rule in default_rules():
        registry.register(rule)
    return registry
