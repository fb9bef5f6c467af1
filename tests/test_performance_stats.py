"""Tests for performance statistics snapshots, merging and tracking."""

import pytest

from artcluster import FuzzyART, FuzzyParameters, PerformanceStats
from artcluster.performance import PerformanceTracker


def numeric_fields(stats):
    data = stats.to_dict()
    data.pop("category_salience")
    return data


class TestPerformanceStats:
    """Immutable snapshots."""

    def test_empty(self):
        """Test that the empty snapshot has zero counters and ratios."""
        stats = PerformanceStats.empty()

        assert stats.total_operations == 0
        assert stats.category_salience == {}
        assert stats.simd_utilization_ratio == 0.0
        assert stats.salience_overhead_ratio == 0.0
        assert stats.sparse_operation_ratio == 0.0

    def test_ratios(self):
        """Test the derived ratio properties."""
        stats = PerformanceStats(
            total_operations=8,
            simd_operations=6,
            average_processing_time=0.004,
            average_salience_computation_time=0.001,
            sparse_vector_operations=2,
        )

        assert stats.simd_utilization_ratio == pytest.approx(0.75)
        assert stats.salience_overhead_ratio == pytest.approx(0.25)
        assert stats.sparse_operation_ratio == pytest.approx(0.25)

    def test_merge_sums_counters(self):
        """Test that merging sums every counter."""
        a = PerformanceStats(total_operations=2, simd_operations=1, statistics_update_count=2,
                             sparse_vector_operations=1)
        b = PerformanceStats(total_operations=3, simd_operations=3, statistics_update_count=1,
                             sparse_vector_operations=0)

        merged = a.merge(b)
        assert merged.total_operations == 5
        assert merged.simd_operations == 4
        assert merged.statistics_update_count == 3
        assert merged.sparse_vector_operations == 1

    def test_merge_weights_averages_by_operations(self):
        """Test that averages are weighted by operation counts."""
        a = PerformanceStats(total_operations=1, average_processing_time=1.0,
                             average_category_utilization=0.2, memory_efficiency_ratio=0.0)
        b = PerformanceStats(total_operations=3, average_processing_time=2.0,
                             average_category_utilization=0.6, memory_efficiency_ratio=0.4)

        merged = a.merge(b)
        assert merged.average_processing_time == pytest.approx(1.75)
        assert merged.average_category_utilization == pytest.approx(0.5)
        assert merged.memory_efficiency_ratio == pytest.approx(0.3)

    def test_merge_weights_salience_time_by_updates(self):
        """Test that salience time is weighted by statistics updates."""
        a = PerformanceStats(total_operations=10, statistics_update_count=1,
                             average_salience_computation_time=4.0)
        b = PerformanceStats(total_operations=1, statistics_update_count=3,
                             average_salience_computation_time=0.0)

        assert a.merge(b).average_salience_computation_time == pytest.approx(1.0)

    def test_merge_unions_salience_and_averages_collisions(self):
        """Test salience key union and averaging of shared keys."""
        a = PerformanceStats(category_salience={0: 0.8, 1: 0.6})
        b = PerformanceStats(category_salience={1: 1.0, 2: 0.5})

        merged = a.merge(b)
        assert merged.category_salience == pytest.approx({0: 0.8, 1: 0.8, 2: 0.5})
        assert a.category_salience == {0: 0.8, 1: 0.6}

    def test_merge_with_empty_is_identity(self):
        """Test that merging with an empty snapshot changes nothing."""
        stats = PerformanceStats(total_operations=4, simd_operations=2, average_processing_time=0.5,
                                 statistics_update_count=4, average_salience_computation_time=0.1,
                                 category_salience={3: 0.9})

        assert stats.merge(PerformanceStats.empty()) == stats
        assert PerformanceStats.empty().merge(stats) == stats

    def test_merge_is_associative(self):
        """Test that grouping does not change a merged result."""
        a = PerformanceStats(total_operations=1, simd_operations=1, average_processing_time=0.3,
                             statistics_update_count=1, average_salience_computation_time=0.2,
                             category_salience={0: 0.9})
        b = PerformanceStats(total_operations=2, average_processing_time=0.6,
                             statistics_update_count=4, average_salience_computation_time=0.1,
                             category_salience={1: 0.7})
        c = PerformanceStats(total_operations=5, sparse_vector_operations=3,
                             average_processing_time=0.1, memory_efficiency_ratio=0.5,
                             category_salience={2: 0.4})

        left = a.merge(b).merge(c)
        right = a.merge(b.merge(c))
        assert numeric_fields(left) == pytest.approx(numeric_fields(right))
        assert left.category_salience == right.category_salience

    def test_merge_all(self):
        """Test merging a sequence of snapshots."""
        parts = [PerformanceStats(total_operations=n) for n in (1, 2, 3)]
        assert PerformanceStats.merge_all(parts).total_operations == 6
        assert PerformanceStats.merge_all([]) == PerformanceStats.empty()


class TestPerformanceTracker:
    """Recording statistics."""

    def test_record_operation_averages(self):
        """Test running averages kept by the tracker."""
        tracker = PerformanceTracker()
        tracker.record_operation(0.002, simd=True, memory_efficiency=0.5, utilization=1.0)
        tracker.record_operation(0.004, sparse=True, memory_efficiency=1.0, utilization=0.0)

        stats = tracker.snapshot()
        assert stats.total_operations == 2
        assert stats.simd_operations == 1
        assert stats.sparse_vector_operations == 1
        assert stats.average_processing_time == pytest.approx(0.003)
        assert stats.memory_efficiency_ratio == pytest.approx(0.75)
        assert stats.average_category_utilization == pytest.approx(0.5)

    def test_salience_is_running_mean(self):
        """Test that category salience is the mean match score."""
        tracker = PerformanceTracker()
        tracker.record_salience(0, 1.0, 0.001)
        tracker.record_salience(0, 0.5, 0.003)
        tracker.record_salience(1, 0.9, 0.002)

        stats = tracker.snapshot()
        assert tracker.salience(0) == pytest.approx(0.75)
        assert tracker.salience(5) == 0.0
        assert stats.category_salience == pytest.approx({0: 0.75, 1: 0.9})
        assert stats.statistics_update_count == 3
        assert stats.average_salience_computation_time == pytest.approx(0.002)


class TestEngineStatistics:
    """Statistics gathered by an engine."""

    def test_learning_records_every_call(self, rng):
        """Test that every learn call is recorded."""
        engine = FuzzyART()
        params = FuzzyParameters(vigilance=0.8)
        engine.fit(rng.random((10, 3)), params)
        engine.predict(rng.random(3), params)

        stats = engine.get_performance_stats()
        assert stats.total_operations == 11
        assert stats.statistics_update_count == 10
        assert set(stats.category_salience) == set(range(engine.get_category_count()))
        assert stats.average_processing_time > 0

    def test_sparse_inputs_are_counted(self):
        """Test that sparse inputs increment the sparse counter."""
        engine = FuzzyART()
        engine.learn([0.0, 0.0, 0.0, 1.0], FuzzyParameters())

        stats = engine.get_performance_stats()
        assert stats.sparse_vector_operations == 1
        assert stats.memory_efficiency_ratio == pytest.approx(0.75)

    def test_category_utilization(self):
        """Test the share of categories that have been updated."""
        engine = FuzzyART()
        params = FuzzyParameters()
        engine.learn([0.1, 0.1], params)
        engine.learn([0.1, 0.1], params)

        assert engine.get_performance_stats().average_category_utilization == pytest.approx(0.5)

    def test_reset_keeps_categories(self, rng):
        """Test that resetting statistics keeps learned categories."""
        engine = FuzzyART()
        engine.fit(rng.random((10, 3)), FuzzyParameters(vigilance=0.8))
        count = engine.get_category_count()

        engine.reset_performance_tracking()

        assert engine.get_performance_stats() == PerformanceStats.empty()
        assert engine.get_category_count() == count
