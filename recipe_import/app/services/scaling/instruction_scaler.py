"""Rewriting ingredient quantities that appear inside instruction text.

Pattern construction is kept in small functions taking the ingredient name and
unit as parameters so each piece can be exercised on its own.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from recipe_import.app.schemas.ingredient import ScaledIngredient
from recipe_import.app.schemas.scaling import IngredientReference, ScaledInstruction, ScalingOptions
from recipe_import.app.services.jsonld_parsing.constants import (
    INSTRUCTION_UNITS,
    UNCOUNTABLE_INGREDIENTS,
    UNIT_ALIASES,
)
from recipe_import.app.services.jsonld_parsing.parsing_utils import (
    canonical_unit,
    pluralize,
    singularize,
)

logger = logging.getLogger(__name__)

INSTRUCTION_QUANTITY_PATTERN = r"\d+\s+\d+/\d+|\d+/\d+|\d+\.\d+|\d+"

TRAILING_OPT_OUT_PATTERNS = (
    re.compile(r"\bto taste\b", re.IGNORECASE),
    re.compile(r"\bas needed\b", re.IGNORECASE),
    re.compile(r"\bfor garnish\b", re.IGNORECASE),
    re.compile(r"\boptional\b", re.IGNORECASE),
)
LEADING_OPT_OUT_PATTERNS = (
    re.compile(r"^\s*garnish with\b", re.IGNORECASE),
    re.compile(r"^\s*season with\b", re.IGNORECASE),
)

# Short all-letter units (tbsp, tsp, g, ...) keep their spelling; real words do not
ABBREVIATION_RE = re.compile(r"^[a-z]{1,4}$", re.IGNORECASE)
SPELLED_OUT_SHORT_UNITS = frozenset(
    {"cup", "cups", "can", "cans", "pint", "pints", "dash", "head", "heads", "leaf", "knob", "knobs"}
)
INVARIANT_UNITS = frozenset({"whole"})

# A phrase starts after punctuation or a conjunction and ends before the next
# conjunction, sentence break or quantity
PHRASE_START_RE = re.compile(r"[.;!?\n,]|\b(?:and|then)\b", re.IGNORECASE)
PHRASE_END_RE = re.compile(r"[.;!?\n]|\b(?:and|with|then)\b|\d", re.IGNORECASE)


@dataclass
class _ReferenceMatch:
    ingredient_index: int
    match: re.Match

    @property
    def start(self) -> int:
        return self.match.start()

    @property
    def end(self) -> int:
        return self.match.end()


def unit_forms(unit: str) -> List[str]:
    """Every spelling that normalizes to the same unit as ``unit``."""
    forms = {unit.lower(), singularize(unit.lower()), pluralize(unit.lower())}
    canonical = canonical_unit(unit)
    if canonical:
        forms.add(canonical)
        forms.update(alias for alias, target in UNIT_ALIASES.items() if target == canonical)
    return sorted(forms, key=len, reverse=True)


def build_unit_alternation(unit: Optional[str] = None) -> str:
    forms = unit_forms(unit) if unit else list(INSTRUCTION_UNITS)
    return "|".join(re.escape(form) for form in forms)


def name_forms(ingredient_name: str) -> List[str]:
    """The name as written plus its singular and plural, longest first."""
    words = ingredient_name.strip().split()
    *head, last = words
    singular = singularize(last)
    forms = {
        " ".join(words),
        " ".join(head + [singular]),
        " ".join(head + [pluralize(singular)]),
    }
    return sorted(forms, key=len, reverse=True)


def build_name_pattern(ingredient_name: str) -> str:
    return "|".join(
        r"\s+".join(re.escape(word) for word in form.split()) for form in name_forms(ingredient_name)
    )


def build_reference_pattern(ingredient_name: str, unit: Optional[str] = None) -> re.Pattern:
    """Match "[**]<qty> [unit] [of|with] <name>[s][**]" for one ingredient."""
    return re.compile(
        rf"(?P<pre>\*{{0,2}})(?<![\d/.])(?P<qty>{INSTRUCTION_QUANTITY_PATTERN})"
        rf"(?P<gap1>\s*)(?:(?P<unit>{build_unit_alternation(unit)})\b(?P<unit_dot>\.?))?"
        rf"(?P<gap2>\s*\*{{0,2}}\s*)(?P<prep>(?:of|with)\s+)?"
        rf"(?P<name>{build_name_pattern(ingredient_name)})(?![A-Za-z])(?P<post>\*{{0,2}})",
        re.IGNORECASE,
    )


def is_opt_out(text: str, start: int, end: int) -> bool:
    """Whether the reference at text[start:end] sits in a to-taste style phrase.

    "Season with" and "garnish with" must lead the phrase; "to taste" and the
    like must follow the reference before the next conjunction or quantity, so
    "2 eggs with salt to taste" still scales the eggs.
    """
    starts = [m.end() for m in PHRASE_START_RE.finditer(text, 0, start)]
    phrase_start = starts[-1] if starts else 0
    phrase_end_match = PHRASE_END_RE.search(text, end)
    phrase_end = phrase_end_match.start() if phrase_end_match else len(text)
    leading = text[phrase_start:end]
    trailing = text[start:phrase_end]
    return any(pattern.search(leading) for pattern in LEADING_OPT_OUT_PATTERNS) or any(
        pattern.search(trailing) for pattern in TRAILING_OPT_OUT_PATTERNS
    )


def _normalize_name(name: str) -> str:
    return " ".join(name.lower().split())


def match_ingredient(reference_name: str, ingredient_name: str) -> bool:
    """Exact, plural-insensitive, or partial comparison of two names."""
    ref = _normalize_name(reference_name)
    ing = _normalize_name(ingredient_name)
    if not ref or not ing:
        return False
    if ref == ing or singularize(ref) == singularize(ing):
        return True
    return ref in ing or ing in ref


def find_scaled_ingredient(reference_name: str, ingredients: List[ScaledIngredient]) -> Optional[ScaledIngredient]:
    for candidate in ingredients:
        if _normalize_name(candidate.original.ingredient_name) == _normalize_name(reference_name):
            return candidate
    for candidate in ingredients:
        if match_ingredient(reference_name, candidate.original.ingredient_name):
            return candidate
    return None


def find_reference_matches(text: str, ingredients: List[ScaledIngredient]) -> List[_ReferenceMatch]:
    """Non-overlapping matches for all ingredients, ordered by position."""
    found: List[_ReferenceMatch] = []
    for idx, ingredient in enumerate(ingredients):
        name = ingredient.original.ingredient_name
        if len(name.strip()) < 2:
            continue
        unit = ingredient.original.unit
        pattern = build_reference_pattern(name, unit if canonical_unit(unit) not in (None, "each") else None)
        found.extend(_ReferenceMatch(idx, m) for m in pattern.finditer(text))
    found.sort(key=lambda ref: (ref.start, -(ref.end - ref.start)))
    selected: List[_ReferenceMatch] = []
    last_end = -1
    for ref in found:
        if ref.start >= last_end:
            selected.append(ref)
            last_end = ref.end
    return selected


def _is_abbreviation(unit: str) -> bool:
    return bool(ABBREVIATION_RE.match(unit)) and unit.lower() not in SPELLED_OUT_SHORT_UNITS


def reconcile_unit(unit: str, is_one: bool) -> str:
    if _is_abbreviation(unit) or unit.lower() in INVARIANT_UNITS:
        return unit
    base = singularize(unit)
    return base if is_one else pluralize(base)


def reconcile_name(name: str, is_one: bool) -> str:
    words = name.split(" ")
    last = words[-1]
    if singularize(last).lower() in UNCOUNTABLE_INGREDIENTS:
        return name
    base = singularize(last)
    words[-1] = base if is_one else pluralize(base)
    return " ".join(words)


def _rewrite(match: re.Match, quantity: str, is_one: bool, preserve_formatting: bool) -> str:
    pre, post, gap2 = match.group("pre"), match.group("post"), match.group("gap2")
    if not preserve_formatting:
        pre, post = "", ""
        gap2 = gap2.replace("*", "")
    unit = match.group("unit")
    return "".join(
        [
            pre,
            quantity,
            match.group("gap1"),
            reconcile_unit(unit, is_one) if unit else "",
            match.group("unit_dot") or "",
            gap2,
            match.group("prep") or "",
            reconcile_name(match.group("name"), is_one),
            post,
        ]
    )


def scale_instruction(
    instruction: str,
    ingredients: List[ScaledIngredient],
    options: Optional[ScalingOptions] = None,
) -> ScaledInstruction:
    """Rewrite quantities of known ingredients mentioned in one instruction."""
    options = options or ScalingOptions()
    warnings: List[str] = []
    matches = find_reference_matches(instruction, ingredients)
    if len(matches) > options.max_references_per_instruction:
        warnings.append(
            f"Found more than {options.max_references_per_instruction} ingredient references; "
            "remaining text was left unscaled"
        )
        matches = matches[: options.max_references_per_instruction]

    scaled_text = instruction
    references: List[IngredientReference] = []
    # Reverse order keeps earlier offsets valid while later text is replaced
    for ref in reversed(matches):
        match = ref.match
        name_text = match.group("name")
        scaled_ingredient = find_scaled_ingredient(
            ingredients[ref.ingredient_index].original.ingredient_name, ingredients
        ) or find_scaled_ingredient(name_text, ingredients)
        reference = IngredientReference(
            full_match=match.group(0),
            ingredient_name=name_text,
            ingredient_index=ref.ingredient_index,
            quantity=match.group("qty"),
            unit=match.group("unit"),
            start_index=ref.start,
            end_index=ref.end,
        )
        if scaled_ingredient is None or scaled_ingredient.scaled_quantity is None:
            warnings.append(f"Could not scale {name_text}")
            references.append(reference)
            continue
        if not options.scale_to_taste and is_opt_out(instruction, ref.start, ref.end):
            references.append(reference.model_copy(update={"opted_out": True}))
            continue
        quantity = scaled_ingredient.display_quantity
        is_one = quantity == "1"
        replacement = _rewrite(match, quantity, is_one, options.preserve_formatting)
        scaled_text = scaled_text[: ref.start] + replacement + scaled_text[ref.end :]
        references.append(reference.model_copy(update={"scaled_quantity": quantity}))
        logger.debug("Scaled reference '%s' -> '%s'", match.group(0), replacement)

    references.reverse()
    return ScaledInstruction(
        original=instruction,
        scaled=scaled_text,
        was_scaled=scaled_text != instruction,
        reference_count=len(references),
        references=references,
        warnings=warnings,
    )


def scale_instructions(
    instructions: List[str],
    ingredients: List[ScaledIngredient],
    options: Optional[ScalingOptions] = None,
) -> List[ScaledInstruction]:
    return [scale_instruction(instruction, ingredients, options) for instruction in instructions]
