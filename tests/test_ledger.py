"""Tests for PointLedger and PhaseIndex.

Covers:
1. PointLedger: pairing of internal/global points, stable arrays, errors
2. PhaseIndex: threshold lookup, phase ranges, consistency with the ledger
"""

import numpy as np
import pytest
from phasemap import PointLedger, PhaseIndex, NotFound, OutOfRange


# ═══════════════════════════════════════════════════════════════════
# 1. PointLedger
# ═══════════════════════════════════════════════════════════════════

def _fill(ledger, n, start=0):
    for i in range(start, start + n):
        # internal dimension varies from point to point
        ledger.add_point(np.arange(i % 3) + i, [i / 100., -float(i)])


class TestPointLedgerPairing:
    """find_internal_point/find_global_point return the inserted pair."""

    def test_ids_are_sequential(self):
        ledger = PointLedger()
        ids = [ledger.add_point([0.5], [0.1 * i, -1.0]) for i in range(5)]
        assert ids == [0, 1, 2, 3, 4]
        assert len(ledger) == 5

    def test_pairs_match(self):
        ledger = PointLedger()
        _fill(ledger, 20)
        for i in range(20):
            np.testing.assert_array_equal(ledger.find_internal_point(i), np.arange(i % 3) + i)
            np.testing.assert_array_equal(ledger.find_global_point(i), [i / 100., -float(i)])

    def test_empty_internal_coordinates(self):
        ledger = PointLedger()
        ipt = ledger.add_point([], [0.5, -3.0])
        assert ledger.find_internal_point(ipt).shape == (0,)

    def test_duplicate_global_points_are_kept(self):
        ledger = PointLedger()
        a = ledger.add_point([1.0, 0.0, 0.0, 1.0], [0.5, -2.0])
        b = ledger.add_point([0.0, 1.0, 1.0, 0.0], [0.5, -2.0])
        assert a != b
        assert len(ledger) == 2
        np.testing.assert_array_equal(ledger.find_global_point(a), ledger.find_global_point(b))
        assert not np.array_equal(ledger.find_internal_point(a), ledger.find_internal_point(b))

    def test_global_points_dense(self):
        ledger = PointLedger()
        _fill(ledger, 4)
        pts = ledger.global_points()
        assert pts.shape == (4, 2)
        np.testing.assert_array_equal(pts[2], [0.02, -2.0])
        np.testing.assert_array_equal(ledger.global_points([3, 1])[:, 1], [-3.0, -1.0])

    def test_internal_points_list(self):
        ledger = PointLedger()
        _fill(ledger, 3)
        yint = ledger.internal_points([0, 2])
        assert [len(y) for y in yint] == [0, 2]


class TestPointLedgerStability:
    """Arrays handed out earlier survive later insertions unchanged."""

    def test_handles_survive_growth(self):
        ledger = PointLedger()
        _fill(ledger, 10)
        internal = [ledger.find_internal_point(i) for i in range(10)]
        glob = [ledger.find_global_point(i) for i in range(10)]
        saved_int = [y.copy() for y in internal]
        saved_glb = [p.copy() for p in glob]
        _fill(ledger, 1000, start=10)
        for i in range(10):
            assert ledger.find_internal_point(i) is internal[i]
            assert ledger.find_global_point(i) is glob[i]
            np.testing.assert_array_equal(internal[i], saved_int[i])
            np.testing.assert_array_equal(glob[i], saved_glb[i])

    def test_stored_arrays_are_read_only(self):
        ledger = PointLedger()
        ipt = ledger.add_point([0.2, 0.8], [0.2, -1.0])
        with pytest.raises(ValueError):
            ledger.find_global_point(ipt)[0] = 0.7
        with pytest.raises(ValueError):
            ledger.find_internal_point(ipt)[1] = 0.3

    def test_input_is_copied(self):
        ledger = PointLedger()
        pglb = np.array([0.2, -1.0])
        ipt = ledger.add_point([1.0], pglb)
        pglb[0] = 0.9
        assert ledger.find_global_point(ipt)[0] == 0.2


class TestPointLedgerErrors:
    """Unknown IDs and protocol violations."""

    def test_unknown_id_raises_not_found(self):
        ledger = PointLedger()
        _fill(ledger, 3)
        with pytest.raises(NotFound):
            ledger.find_internal_point(3)
        with pytest.raises(NotFound):
            ledger.find_global_point(-1)

    def test_not_found_is_a_key_error(self):
        ledger = PointLedger()
        with pytest.raises(KeyError):
            ledger.find_global_point(0)

    def test_dimension_mismatch_fails_fast(self):
        ledger = PointLedger()
        ledger.add_point([1.0], [0.5, -1.0])
        with pytest.raises(AssertionError):
            ledger.add_point([1.0], [0.5, 0.5, -1.0])

    def test_frozen_ledger_rejects_points(self):
        ledger = PointLedger()
        ledger.add_point([1.0], [0.5, -1.0])
        ledger.freeze()
        with pytest.raises(AssertionError):
            ledger.add_point([1.0], [0.6, -1.0])

    def test_reset(self):
        ledger = PointLedger()
        _fill(ledger, 5)
        ledger.freeze()
        ledger.reset()
        assert len(ledger) == 0
        assert not ledger.frozen
        assert ledger.add_point([0.0], [0.1, 0.2, 0.3]) == 0


# ═══════════════════════════════════════════════════════════════════
# 2. PhaseIndex
# ═══════════════════════════════════════════════════════════════════

@pytest.fixture
def index_352():
    index = PhaseIndex()
    index.add_phase_boundary("alpha", 3)
    index.add_phase_boundary("beta", 5)
    index.add_phase_boundary("gamma", 2)
    return index


class TestPhaseIndexLookup:
    """Thresholds 3, 8, 10 for phases of 3, 5 and 2 points."""

    def test_thresholds(self, index_352):
        assert index_352.thresholds == [3, 8, 10]
        assert index_352.total == 10

    def test_first_phase(self, index_352):
        for i in range(3):
            assert index_352.lookup(i) == ("alpha", i)

    def test_second_phase(self, index_352):
        for i in range(3, 8):
            assert index_352.lookup(i) == ("beta", i - 3)

    def test_third_phase(self, index_352):
        assert index_352.lookup(8) == ("gamma", 0)
        assert index_352.lookup(9) == ("gamma", 1)

    def test_beyond_last_threshold(self, index_352):
        with pytest.raises(OutOfRange):
            index_352.lookup(10)

    def test_negative_id(self, index_352):
        with pytest.raises(OutOfRange):
            index_352.lookup(-1)

    def test_out_of_range_is_an_index_error(self):
        with pytest.raises(IndexError):
            PhaseIndex().lookup(0)

    def test_numpy_integer_ids(self, index_352):
        assert index_352.lookup(np.int64(7)) == ("beta", 4)


class TestPhaseIndexRanges:
    """phase_range, consistency checks and protocol violations."""

    def test_phase_range(self, index_352):
        assert index_352.phase_range("alpha") == range(0, 3)
        assert index_352.phase_range("beta") == range(3, 8)
        assert index_352.phase_range("gamma") == range(8, 10)

    def test_unknown_phase(self, index_352):
        with pytest.raises(NotFound):
            index_352.phase_range("delta")

    def test_consistency_with_ledger(self, index_352):
        ledger = PointLedger()
        _fill(ledger, 10)
        index_352.check_consistency(ledger)
        ledger.add_point([0.0], [0.5, 0.0])
        with pytest.raises(AssertionError):
            index_352.check_consistency(ledger)

    def test_empty_phase_is_rejected(self):
        index = PhaseIndex()
        with pytest.raises(AssertionError):
            index.add_phase_boundary("alpha", 0)

    def test_duplicate_phase_is_rejected(self, index_352):
        with pytest.raises(AssertionError):
            index_352.add_phase_boundary("beta", 4)

    def test_reset(self, index_352):
        index_352.reset()
        assert index_352.total == 0
        assert index_352.phases == []
