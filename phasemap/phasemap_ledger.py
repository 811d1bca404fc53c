#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#---------------------------------------------------------------------------

import logging
import numpy as np
from .phasemap_errors import NotFound

logger = logging.getLogger(__name__)

class PointLedger(object):
    """
    Append-only storage of all points sampled during one global minimization
    pass. Each point is stored as a pair: its internal coordinates (the
    degrees of freedom of the phase it belongs to, e.g. site fractions) and
    its global coordinates (the [x[:-1],G] point used for the convex hull).
    Both are stored together in one record, so the N-th internal point and
    the N-th global point always belong to the same sample.

    The point ID (an integer) is the only handle to a point. IDs are handed
    out in insertion order, never reused, and the stored arrays are never
    moved or modified (they are made read-only on insertion). An array you
    got from find_internal_point() or find_global_point() therefore stays
    valid, whatever is added to the ledger later.

    Usage:

      ledger = PointLedger()
      ipt    = ledger.add_point([0.3,0.7],[0.3,-12000.])
      y      = ledger.find_internal_point(ipt)
      p      = ledger.find_global_point(ipt)
    """
    def __init__(self):
        self.reset()

    def reset(self):
        """
        Throw away all points (start of a new pass).
        """
        self._records = []
        self.ndim     = None
        self.frozen   = False

    def __len__(self):
        return len(self._records)

    def freeze(self):
        """
        Once the hull is being constructed, no more points may be added.
        """
        self.frozen = True

    def add_point(self,internal_coords,global_coords):
        """
        Append one sample.

        Arguments:

          internal_coords   The coordinates of the point in the phase-internal
                            space. The length may differ from phase to phase
                            (and can be 0 for a fixed-composition phase).

          global_coords     The coordinates in the global space. The length
                            is fixed by the first point that is added.

        Returns:

          ipt               The point ID of the new point.
        """
        assert not self.frozen, 'Error: Cannot add points to a frozen ledger (the hull has already been computed).'
        yint = np.array(internal_coords,dtype=float).ravel()
        pglb = np.array(global_coords,dtype=float).ravel()
        if self.ndim is None:
            assert len(pglb)>0, 'Error: Global coordinates cannot be empty.'
            self.ndim = len(pglb)
        assert len(pglb)==self.ndim, f'Error: Global point has dimension {len(pglb)}, but the ledger has dimension {self.ndim}.'
        yint.setflags(write=False)
        pglb.setflags(write=False)
        self._records.append((yint,pglb))
        return len(self._records)-1

    def _get_record(self,ipt):
        if isinstance(ipt,(bool,np.bool_)) or not isinstance(ipt,(int,np.integer)):
            raise NotFound(f'Point ID {ipt!r} is not an integer.')
        if ipt<0 or ipt>=len(self._records):
            raise NotFound(f'Point ID {ipt} was never inserted (ledger holds {len(self._records)} points).')
        return self._records[ipt]

    def find_internal_point(self,global_id):
        """
        Return the (read-only) internal coordinates of the point with this ID.
        """
        return self._get_record(global_id)[0]

    def find_global_point(self,internal_id):
        """
        Return the (read-only) global coordinates of the point with this ID.
        """
        return self._get_record(internal_id)[1]

    def global_points(self,ids=None):
        """
        Dense array pts[npts,ndim] of global points, in ID order (or in the
        order of the given ids). This is what goes into the hull builder.
        """
        if ids is None:
            ids = range(len(self._records))
        ids = list(ids)
        if len(ids)==0:
            return np.zeros((0,self.ndim or 0))
        return np.stack([self._get_record(i)[1] for i in ids])

    def internal_points(self,ids):
        """
        List of the internal coordinate arrays of the given point IDs. This is
        a list rather than an array, because different phases have different
        internal dimensions.
        """
        return [self._get_record(i)[0] for i in ids]
