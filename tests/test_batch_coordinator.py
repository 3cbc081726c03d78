import asyncio

import pytest

from recipe_import.app.core.config import Settings
from recipe_import.app.services.ingredients.batch_coordinator import (
    IngredientParsingCancelled,
    calculate_optimal_batch_size,
    calculate_progress_percentage,
    chunk,
    create_initial_progress,
    estimate_parsing_time,
    format_progress_percentage,
    format_time_remaining,
    merge_with_fallback,
    needs_batch_processing,
    parse_ingredients_in_batches,
    validate_ingredient_batch,
)
from recipe_import.app.services.ingredients.fallback_parser import parse_ingredient_string


def ai_parsed(line):
    return parse_ingredient_string(line).model_copy(
        update={"parsing_method": "ai", "confidence": 0.9, "requires_manual_review": False}
    )


class RecordingDecomposer:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.batches = []

    async def __call__(self, lines):
        self.batches.append(list(lines))
        if self.fail_on and any(self.fail_on in line for line in lines):
            raise RuntimeError("decomposition unavailable")
        return [ai_parsed(line) for line in lines]


@pytest.fixture
def small_batches():
    return Settings(INGREDIENT_MAX_BATCH_SIZE=2, _env_file=None)


def test_chunk():
    assert chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    assert chunk([], 3) == []
    with pytest.raises(ValueError):
        chunk([1], 0)


@pytest.mark.parametrize(
    "total, cap, expected",
    [(25, 20, 13), (45, 20, 15), (10, 20, 10), (40, 20, 20), (41, 20, 14), (0, 20, 20)],
)
def test_calculate_optimal_batch_size(total, cap, expected):
    assert calculate_optimal_batch_size(total, cap) == expected


@pytest.mark.parametrize("ms, expected", [(0, "<1s"), (500, "<1s"), (5000, "5s"), (90000, "1m 30s"), (120000, "2m")])
def test_format_time_remaining(ms, expected):
    assert format_time_remaining(ms) == expected


def test_progress_helpers():
    progress = create_initial_progress(25, 13, 2000)
    assert progress.total_batches == 2
    assert progress.current_batch == 0
    assert progress.estimated_time_remaining_ms == 4000
    assert progress.can_cancel
    assert calculate_progress_percentage(progress) == 0
    assert format_progress_percentage(progress.model_copy(update={"parsed_count": 13})) == "52%"
    assert estimate_parsing_time(25, 13, 2000) == 4000
    assert estimate_parsing_time(0, 13, 2000) == 0
    assert needs_batch_processing(21, 20)
    assert not needs_batch_processing(20, 20)


def test_validate_ingredient_batch():
    problems = validate_ingredient_batch(["", "x" * 600, "2 eggs"], max_batch_size=2, max_line_length=500)
    assert len(problems) == 3
    assert validate_ingredient_batch(["2 eggs"], max_batch_size=2, max_line_length=500) == []


@pytest.mark.asyncio
async def test_batches_run_in_order_with_progress(small_batches):
    lines = ["1 egg", "2 cups flour", "1 tsp salt", "3 apples", "1 cup milk"]
    decompose = RecordingDecomposer()
    progress = []

    result = await parse_ingredients_in_batches(lines, decompose, on_progress=progress.append, settings=small_batches)

    assert decompose.batches == [lines[0:2], lines[2:4], lines[4:5]]
    assert [item.original_text for item in result.parsed_ingredients] == lines
    assert result.failed_ingredients == []
    assert [p.current_batch for p in progress] == [0, 1, 2, 3]
    assert progress[-1].parsed_count == 5
    assert progress[-1].estimated_time_remaining_ms == 0
    assert progress[-1].can_cancel is False
    assert result.total_duration_ms >= 0


@pytest.mark.asyncio
async def test_failed_batch_does_not_abort_later_batches(small_batches):
    lines = ["1 egg", "bad line", "1 tsp salt", "3 apples"]
    decompose = RecordingDecomposer(fail_on="bad")

    result = await parse_ingredients_in_batches(lines, decompose, settings=small_batches)

    assert len(decompose.batches) == 2
    assert result.failed_ingredients == ["1 egg", "bad line"]
    assert result.failed_indices == [0, 1]
    assert [item.original_text for item in result.parsed_ingredients] == ["1 tsp salt", "3 apples"]

    merged = merge_with_fallback(lines, result)
    assert [item.original_text for item in merged] == lines
    assert [item.parsing_method for item in merged] == ["manual", "manual", "ai", "ai"]


@pytest.mark.asyncio
async def test_count_mismatch_is_a_batch_failure(small_batches):
    async def drops_one(lines):
        return [ai_parsed(line) for line in lines[:1]]

    result = await parse_ingredients_in_batches(["1 egg", "2 eggs"], drops_one, settings=small_batches)
    assert result.parsed_ingredients == []
    assert result.failed_ingredients == ["1 egg", "2 eggs"]


@pytest.mark.asyncio
async def test_batch_size_is_capped(small_batches):
    decompose = RecordingDecomposer()
    await parse_ingredients_in_batches(["a egg", "b egg", "c egg"], decompose, batch_size=50, settings=small_batches)
    assert [len(batch) for batch in decompose.batches] == [2, 1]


@pytest.mark.asyncio
async def test_cancel_before_start(small_batches):
    signal = asyncio.Event()
    signal.set()
    decompose = RecordingDecomposer()
    with pytest.raises(IngredientParsingCancelled):
        await parse_ingredients_in_batches(["1 egg", "2 eggs"], decompose, signal=signal, settings=small_batches)
    assert decompose.batches == []


@pytest.mark.asyncio
async def test_cancel_between_batches(small_batches):
    signal = asyncio.Event()
    decompose = RecordingDecomposer()

    async def on_progress(progress):
        if progress.current_batch == 1:
            signal.set()

    with pytest.raises(IngredientParsingCancelled):
        await parse_ingredients_in_batches(
            ["1 egg", "2 eggs", "3 eggs", "4 eggs"],
            decompose,
            on_progress=on_progress,
            signal=signal,
            settings=small_batches,
        )
    assert len(decompose.batches) == 1


@pytest.mark.asyncio
async def test_empty_input(small_batches):
    progress = []
    result = await parse_ingredients_in_batches([], RecordingDecomposer(), on_progress=progress.append, settings=small_batches)
    assert result.parsed_ingredients == []
    assert progress == []
