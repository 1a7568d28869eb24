"""Context assembly for object generation."""
from backend.app.context.builders import (
    BaseContextBuilder,
    CombatContextBuilder,
    HierarchyContextBuilder,
    SocialContextBuilder,
    create_context_builder,
)
from backend.app.context.models import GenerationContext

__all__ = [
    "BaseContextBuilder",
    "CombatContextBuilder",
    "GenerationContext",
    "HierarchyContextBuilder",
    "SocialContextBuilder",
    "create_context_builder",
]
