"""Tests for sequential and parallel execution strategies."""

import threading

import pytest

from PyMatch.processing import ParallelExecution, Processable, SequentialExecution


class TestParallelExecution:
    """Test partition-map execution on a thread pool."""

    def test_invalid_parameters(self):
        with pytest.raises(ValueError, match="max_workers"):
            ParallelExecution(max_workers=0)
        with pytest.raises(ValueError, match="chunk_size"):
            ParallelExecution(chunk_size=0)

    @pytest.mark.parametrize("chunk_size", [1, 7, 1000])
    def test_same_output_as_sequential(self, chunk_size):
        """Output order equals input order regardless of chunking."""
        items = list(range(200))
        parallel = ParallelExecution(max_workers=4, chunk_size=chunk_size, max_pending=3)

        result = list(parallel.flat_map(lambda x: [x, -x] if x % 3 else [], items))

        assert result == list(SequentialExecution().flat_map(lambda x: [x, -x] if x % 3 else [], items))

    def test_runs_in_worker_threads(self):
        """Chunks are mapped outside the calling thread."""
        main = threading.get_ident()
        threads = list(ParallelExecution(max_workers=2, chunk_size=1).flat_map(
            lambda x: [threading.get_ident()], range(4)
        ))
        assert all(ident != main for ident in threads)

    def test_aggregation_matches_sequential(self):
        """Grouped reduction gives identical results under both strategies."""
        items = [(i % 7, i) for i in range(100)]

        def reduce(key, values):
            return [(key, sorted(v for _, v in values))]

        sequential = Processable(items).aggregate(lambda x: x[0], reduce).to_list()
        parallel = (
            Processable(items, execution=ParallelExecution(max_workers=3, chunk_size=2))
            .aggregate(lambda x: x[0], reduce)
            .to_list()
        )
        assert parallel == sequential

    def test_errors_propagate(self):
        """Exceptions raised in workers surface to the caller."""
        def fail(x):
            raise KeyError(x)

        with pytest.raises(KeyError):
            list(ParallelExecution(max_workers=2).flat_map(fail, [1, 2]))
