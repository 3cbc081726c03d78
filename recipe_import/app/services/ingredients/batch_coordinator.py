"""Sequential, cancellable batching of ingredient decomposition calls."""

import asyncio
import inspect
import logging
import math
import time
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from recipe_import.app.core.config import Settings, get_settings
from recipe_import.app.schemas.ingredient import (
    BatchParsingResult,
    IngredientParsingProgress,
    ParsedIngredient,
)
from recipe_import.app.services.ingredients.fallback_parser import parse_ingredient_string
from recipe_import.app.services.ingredients.ingredient_parser import DecomposeBatch

logger = logging.getLogger(__name__)

T = TypeVar("T")
ProgressCallback = Callable[[IngredientParsingProgress], Any]


class IngredientParsingCancelled(Exception):
    """Raised when the caller cancels a batched parse between chunks."""


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    if size <= 0:
        raise ValueError("Chunk size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def calculate_optimal_batch_size(total: int, max_batch_size: int) -> int:
    """Spread items evenly over the fewest batches that respect the cap.

    25 items with a cap of 20 gives 13 (13 + 12), not 20 + 5.
    """
    if total <= 0:
        return max(1, max_batch_size)
    if total <= max_batch_size:
        return total
    batches = math.ceil(total / max_batch_size)
    return math.ceil(total / batches)


def needs_batch_processing(count: int, max_batch_size: int) -> bool:
    return count > max_batch_size


def estimate_parsing_time(count: int, batch_size: int, per_batch_ms: int) -> int:
    if count <= 0:
        return 0
    return math.ceil(count / max(batch_size, 1)) * per_batch_ms


def create_initial_progress(
    total_count: int, batch_size: int, per_batch_ms: int
) -> IngredientParsingProgress:
    total_batches = math.ceil(total_count / batch_size) if total_count else 0
    return IngredientParsingProgress(
        current_batch=0,
        total_batches=total_batches,
        parsed_count=0,
        total_count=total_count,
        estimated_time_remaining_ms=total_batches * per_batch_ms,
        can_cancel=total_batches > 0,
    )


def calculate_progress_percentage(progress: IngredientParsingProgress) -> int:
    if progress.total_count <= 0:
        return 0
    return min(100, round(progress.parsed_count / progress.total_count * 100))


def format_progress_percentage(progress: IngredientParsingProgress) -> str:
    return f"{calculate_progress_percentage(progress)}%"


def format_time_remaining(ms: int) -> str:
    """Compact countdown text: "<1s", "5s", "1m 30s", "2m"."""
    if ms < 1000:
        return "<1s"
    seconds = math.ceil(ms / 1000)
    if seconds < 60:
        return f"{seconds}s"
    minutes, remainder = divmod(seconds, 60)
    if remainder:
        return f"{minutes}m {remainder}s"
    return f"{minutes}m"


def validate_ingredient_batch(lines: Sequence[str], max_batch_size: int, max_line_length: int) -> List[str]:
    """Problems that would make a batch unsuitable for decomposition."""
    problems: List[str] = []
    if len(lines) > max_batch_size:
        problems.append(f"Batch has {len(lines)} ingredients (limit: {max_batch_size})")
    for idx, line in enumerate(lines):
        if not line or not line.strip():
            problems.append(f"Ingredient {idx + 1} is empty")
        elif len(line) > max_line_length:
            problems.append(f"Ingredient {idx + 1} is too long ({len(line)} characters, limit: {max_line_length})")
    return problems


async def _notify(on_progress: Optional[ProgressCallback], progress: IngredientParsingProgress) -> None:
    if on_progress is None:
        return
    outcome = on_progress(progress)
    if inspect.isawaitable(outcome):
        await outcome


async def parse_ingredients_in_batches(
    lines: Sequence[str],
    decompose: DecomposeBatch,
    batch_size: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    signal: Optional[asyncio.Event] = None,
    settings: Optional[Settings] = None,
) -> BatchParsingResult:
    """Run ``decompose`` over ``lines`` one chunk at a time, in order.

    A chunk that raises is recorded in ``failed_ingredients`` and the next
    chunk still runs. ``signal`` is checked before each chunk; once set, the
    whole operation raises ``IngredientParsingCancelled`` and partial results
    are dropped.
    """
    settings = settings or get_settings()
    max_batch_size = settings.ingredient_max_batch_size
    if batch_size is None:
        batch_size = calculate_optimal_batch_size(len(lines), max_batch_size)
    batch_size = max(1, min(batch_size, max_batch_size))

    batches = chunk(list(lines), batch_size)
    total_batches = len(batches)
    result = BatchParsingResult()
    started = time.perf_counter()
    batch_durations: List[float] = []
    offset = 0
    if batches:
        await _notify(
            on_progress,
            create_initial_progress(len(lines), batch_size, settings.ingredient_batch_estimate_ms),
        )

    for batch_idx, batch in enumerate(batches):
        if signal is not None and signal.is_set():
            logger.info("Ingredient parsing cancelled before batch %d of %d", batch_idx + 1, total_batches)
            raise IngredientParsingCancelled("Ingredient parsing was cancelled")

        batch_started = time.perf_counter()
        try:
            parsed = await decompose(batch)
            if len(parsed) != len(batch):
                raise ValueError(f"Decomposer returned {len(parsed)} results for {len(batch)} lines")
            result.parsed_ingredients.extend(parsed)
        except IngredientParsingCancelled:
            raise
        except Exception as exc:
            logger.warning(
                "Ingredient batch %d of %d failed (%d lines): %s",
                batch_idx + 1,
                total_batches,
                len(batch),
                exc,
            )
            result.failed_ingredients.extend(batch)
            result.failed_indices.extend(range(offset, offset + len(batch)))
        batch_durations.append((time.perf_counter() - batch_started) * 1000)
        offset += len(batch)

        remaining = total_batches - (batch_idx + 1)
        average_ms = sum(batch_durations) / len(batch_durations)
        progress = IngredientParsingProgress(
            current_batch=batch_idx + 1,
            total_batches=total_batches,
            parsed_count=offset,
            total_count=len(lines),
            estimated_time_remaining_ms=round(average_ms * remaining),
            can_cancel=remaining > 0,
        )
        logger.info("Ingredient batch %d of %d finished", batch_idx + 1, total_batches)
        await _notify(on_progress, progress)

    result.total_duration_ms = round((time.perf_counter() - started) * 1000)
    return result


def merge_with_fallback(
    lines: Sequence[str],
    result: BatchParsingResult,
    fallback: Callable[[str], ParsedIngredient] = parse_ingredient_string,
) -> List[ParsedIngredient]:
    """Index-aligned parse list with failed lines filled in by ``fallback``."""
    failed = set(result.failed_indices)
    successes = iter(result.parsed_ingredients)
    merged: List[ParsedIngredient] = []
    for idx, line in enumerate(lines):
        merged.append(fallback(line) if idx in failed else next(successes))
    return merged
