"""Built-in object type definitions."""
from backend.app.objects.types.area import AREA
from backend.app.objects.types.character import CHARACTER
from backend.app.objects.types.item import ITEM
from backend.app.objects.types.monster import MONSTER
from backend.app.objects.types.npc import NPC

BUILTIN_TYPES = (CHARACTER, NPC, MONSTER, AREA, ITEM)

__all__ = ["AREA", "BUILTIN_TYPES", "CHARACTER", "ITEM", "MONSTER", "NPC"]
