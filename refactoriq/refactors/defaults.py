"""Default refactoring provider registration."""
from __future__ import annotations

from refactoriq.refactors.base_provider import BaseRefactoringProvider
from refactoriq.refactors.glide_api_refactors import (
    DeprecatedGlideAjaxRefactoringProvider, LogToErrorRefactoringProvider,
)
from refactoriq.refactors.glide_performance_refactors import HardcodedValuesRefactoringProvider
from refactoriq.refactors.glide_query_refactors import (
    NestedQueryRefactoringProvider, QueryConditionsRefactoringProvider,
)
from refactoriq.refactors.registry import SuggestionProviderRegistry
from refactoriq.refactors.ts_module_refactors import UnusedImportsRefactoringProvider
from refactoriq.refactors.ts_performance_refactors import LargeLoopsRefactoringProvider
from refactoriq.refactors.ts_type_refactors import MissingTypeRefactoringProvider, NoAnyRefactoringProvider

__all__ = ["default_providers", "build_default_provider_registry"]


def default_providers() -> list[BaseRefactoringProvider]:
    return [
        NestedQueryRefactoringProvider(),
        QueryConditionsRefactoringProvider(),
        DeprecatedGlideAjaxRefactoringProvider(),
        LogToErrorRefactoringProvider(),
        HardcodedValuesRefactoringProvider(),
        NoAnyRefactoringProvider(),
        MissingTypeRefactoringProvider(),
        UnusedImportsRefactoringProvider(),
        LargeLoopsRefactoringProvider(),
    ]


def build_default_provider_registry() -> SuggestionProviderRegistry:
    registry = SuggestionProviderRegistry()
    for provider in default_providers():
        registry.register_provider(provider)
    return registry
