import glob
import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .color_sampler.schemas import ComparisonResult, ExpectedColorStats

logger = logging.getLogger(__name__)


class RecipeNotFound(LookupError):
    pass


class StepNotFound(RecipeNotFound):
    pass


@dataclass(frozen=True)
class Ingredient:
    name: str
    amount: str


@dataclass(frozen=True)
class Step:
    id: str
    order: int
    title: str
    instructions: str
    expected_color_stats: ExpectedColorStats
    reference_image_url: Optional[str] = None
    tips: Tuple[str, ...] = ()
    ingredients: Tuple[Ingredient, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "order": self.order,
            "title": self.title,
            "instructions": self.instructions,
            "referenceImageUrl": self.reference_image_url,
            "expectedColorStats": self.expected_color_stats.to_dict(),
            "tips": list(self.tips),
            "ingredients": [{"name": i.name, "amount": i.amount} for i in self.ingredients],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        return cls(
            id=str(data["id"]),
            order=int(data["order"]),
            title=data["title"],
            instructions=data["instructions"],
            expected_color_stats=ExpectedColorStats.from_dict(data["expectedColorStats"]),
            reference_image_url=data.get("referenceImageUrl"),
            tips=tuple(data.get("tips") or ()),
            ingredients=tuple(Ingredient(name=i["name"], amount=i["amount"]) for i in data.get("ingredients") or ()),
        )


@dataclass(frozen=True)
class Recipe:
    id: str
    title: str
    description: str
    steps: Tuple[Step, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        steps = sorted((Step.from_dict(s) for s in data["steps"]), key=lambda s: s.order)
        return cls(id=str(data["id"]), title=data["title"], description=data.get("description", ""), steps=tuple(steps))


def load_recipe(path: str) -> Recipe:
    with open(path, 'r', encoding='utf-8') as f:
        return Recipe.from_dict(json.load(f))


def load_recipes(folder: str) -> List[Recipe]:
    recipes = [load_recipe(path) for path in glob.glob(os.path.join(folder, '*.json'))]
    recipes.sort(key=lambda r: r.id)
    return recipes


def get_recipe(recipes: List[Recipe], recipe_id: str) -> Recipe:
    for recipe in recipes:
        if recipe.id == recipe_id:
            return recipe
    raise RecipeNotFound(recipe_id)


def bounded_step_index(recipe: Recipe, step_number: int) -> int:
    """
    Convert a 1-based step number from a URL into a valid 0-based index.
    """
    return max(0, min(len(recipe.steps) - 1, step_number - 1))


def step_index_for(recipe: Recipe, step_number: int) -> int:
    index = max(0, step_number - 1)
    if index >= len(recipe.steps):
        raise StepNotFound(f"{recipe.id} has no step {step_number}")
    return index


def storage_key(recipe_id: str) -> str:
    return f"color-cooking:{recipe_id}"


@dataclass(frozen=True)
class CookingSession:
    """
    Progress through one recipe: the current step and one analysis result per step index.
    Updates return a new session, so stored results are never shared with the caller.
    """
    recipe_id: str
    current_step: int = 0
    results: Dict[int, ComparisonResult] = field(default_factory=dict)

    def at_step(self, step_index: int) -> "CookingSession":
        return replace(self, current_step=step_index)

    def with_result(self, step_index: int, result: ComparisonResult) -> "CookingSession":
        results = dict(self.results)
        results[step_index] = result
        return replace(self, results=results)

    def result_for(self, step_index: int) -> Optional[ComparisonResult]:
        return self.results.get(step_index)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipeId": self.recipe_id,
            "currentStep": self.current_step,
            "steps": {str(index): {"result": result.to_dict()} for index, result in sorted(self.results.items())},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CookingSession":
        results = {}
        for index, state in (data.get("steps") or {}).items():
            if state and state.get("result"):
                results[int(index)] = ComparisonResult.from_dict(state["result"])
        return cls(recipe_id=data["recipeId"], current_step=int(data.get("currentStep", 0)), results=results)


def read_session(store, recipe_id: str) -> CookingSession:
    """
    Load the cooking session for a recipe from a dict-like store (e.g. the py4web session).
    Unreadable records start a fresh session.
    """
    data = store.get(storage_key(recipe_id))
    if not data:
        return CookingSession(recipe_id=recipe_id)
    try:
        return CookingSession.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Discarding unreadable session for %s: %r", recipe_id, e)
        return CookingSession(recipe_id=recipe_id)


def write_session(store, cooking_session: CookingSession) -> None:
    store[storage_key(cooking_session.recipe_id)] = cooking_session.to_dict()
