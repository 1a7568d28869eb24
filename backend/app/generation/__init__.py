"""Object generation pipeline."""
from backend.app.generation.service import ObjectGenerationService
from backend.app.generation.validator import ResponseValidator

__all__ = ["ObjectGenerationService", "ResponseValidator"]
