#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#---------------------------------------------------------------------------

import numpy as np
from .phasemap_errors import NotFound, OutOfRange

class PhaseIndex(object):
    """
    Tells, for any point ID in the PointLedger, which phase produced that
    point. The points of each phase are appended to the ledger as one
    contiguous run, after which add_phase_boundary() is called. This
    class stores the cumulative thresholds of these runs. For instance,
    for three phases with 3, 5 and 2 points the thresholds are 3, 8 and 10,
    so point 4 belongs to the second phase, and is its point nr 1 (offset
    4-3).

    The order of add_phase_boundary() calls must be the order in which
    the phases were appended to the ledger. This is not checked here, but
    check_consistency(ledger) compares the totals.
    """
    def __init__(self):
        self.reset()

    def reset(self):
        self.thresholds = []
        self.phases     = []
        self._iphase    = {}

    @property
    def total(self):
        """
        The number of points covered by the index (= the last threshold).
        """
        if len(self.thresholds)==0:
            return 0
        return self.thresholds[-1]

    def add_phase_boundary(self,phase,count):
        """
        Record that the last count points of the ledger belong to phase.

        Arguments:

          phase     The phase identity (a name, or a phase object).

          count     The number of points of this phase. Must be >0, so that
                    the thresholds are strictly increasing.
        """
        assert count>0, f'Error: Phase {phase} must have at least one point.'
        assert phase not in self._iphase, f'Error: Phase {phase} already has a boundary in the index.'
        self._iphase[phase] = len(self.phases)
        self.thresholds.append(self.total+int(count))
        self.phases.append(phase)

    def lookup(self,global_id):
        """
        Returns:

          (phase,offset)   The phase owning point global_id, and the position
                           of that point within the run of points of that phase.
        """
        if global_id<0 or global_id>=self.total:
            raise OutOfRange(f'Point ID {global_id} is outside of the indexed range [0,{self.total}).')
        i     = int(np.searchsorted(self.thresholds,global_id,side='right'))
        start = self.thresholds[i-1] if i>0 else 0
        return self.phases[i],int(global_id-start)

    def phase_range(self,phase):
        """
        The range of point IDs belonging to phase.
        """
        if phase not in self._iphase:
            raise NotFound(f'Phase {phase} is not in the index.')
        i     = self._iphase[phase]
        start = self.thresholds[i-1] if i>0 else 0
        return range(start,self.thresholds[i])

    def check_consistency(self,ledger):
        """
        Debugging aid: the last threshold must equal the number of points in
        the ledger, otherwise points were appended without a boundary (or the
        other way around).
        """
        assert self.total==len(ledger), f'Error: PhaseIndex covers {self.total} points, but the ledger holds {len(ledger)}.'
