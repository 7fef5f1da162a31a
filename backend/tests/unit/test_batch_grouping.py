"""
Unit tests for batch_grouping.

Version: 1.0.0
"""
import asyncio

import pytest

from catalog_hub.utils.batch_grouping import calculate_batch_groups, run_in_chunks


pytestmark = pytest.mark.unit


class TestCalculateBatchGroups:

    def test_even_split(self):
        assert calculate_batch_groups([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]

    def test_remainder(self):
        assert calculate_batch_groups([1, 2, 3], 2) == [[1, 2], [3]]

    def test_empty(self):
        assert calculate_batch_groups([], 5) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            calculate_batch_groups([1], 0)


class TestRunInChunks:

    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        async def worker(item):
            await asyncio.sleep(0.01 * (3 - item))
            return item * 10

        assert await run_in_chunks([0, 1, 2], worker, chunk_size=2) == [0, 10, 20]

    @pytest.mark.asyncio
    async def test_chunks_bound_concurrency(self):
        active = 0
        peak = 0

        async def worker(item):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0)
            active -= 1
            return item

        await run_in_chunks(list(range(7)), worker, chunk_size=3)

        assert peak == 3
