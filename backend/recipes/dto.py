"""Входные данные операций над рецептом."""
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, Optional


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class StepInput:
    step_number: int
    instruction: str


@dataclass(frozen=True)
class IngredientLinkInput:
    ingredient_id: int
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    note: Optional[str] = None


@dataclass
class RecipeDraft:
    title: str
    difficulty: str
    description: Optional[str] = ""
    prep_minutes: Optional[int] = None
    cook_minutes: Optional[int] = None
    servings: Optional[int] = None
    is_public: bool = True
    calories: Optional[int] = None

    def values(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class RecipePatch:
    """Частичное изменение: меняются только поля, отличные от UNSET."""

    title: Any = UNSET
    difficulty: Any = UNSET
    description: Any = UNSET
    prep_minutes: Any = UNSET
    cook_minutes: Any = UNSET
    servings: Any = UNSET
    is_public: Any = UNSET
    calories: Any = UNSET

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }
