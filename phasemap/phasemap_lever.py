#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#---------------------------------------------------------------------------

from collections import namedtuple
import numpy as np
from .phasemap_support import reduce_x, complete_x, lever_rule

# The amount and the state of one phase in an equilibrium:
#
#   point_id          The ID of the hull vertex in the PointLedger
#   phase             The phase identity that produced this point
#   offset            The position of this point within the points of its phase
#   internal_coords   The internal degrees of freedom (e.g. site fractions)
#   x                 The full composition x[0:ncomp] of this phase
#   G                 The Gibbs energy of this point
#   fraction          The molar fraction of the system in this phase
PhaseAmount = namedtuple('PhaseAmount',['point_id','phase','offset','internal_coords','x','G','fraction'])

class LeverSolver(object):
    """
    Given a facet (a tie simplex) and the mean composition of the system,
    compute the phase fractions with the lever rule, and find for each
    corner the phase it belongs to and its internal state.

    Arguments:

      ledger     The PointLedger
      index      The PhaseIndex

    Optional:

      eps        Weights down to -eps are accepted (round-off). Anything
                 more negative raises InfeasibleWeights.
    """
    def __init__(self,ledger,index,eps=1e-9):
        self.ledger = ledger
        self.index  = index
        self.eps    = eps

    def solve(self,facet,target):
        """
        Arguments:

          facet      A Facet, or a Candidate (whose weights are then set).

          target     The mean composition (full x or x[:-1]).

        Returns:

          amounts    Dictionary point_id -> PhaseAmount, in corner order.

        Raises SingularSystem or InfeasibleWeights.
        """
        candidate = None
        if hasattr(facet,'facet'):
            candidate = facet
            facet     = candidate.facet
        ncomp   = self.ledger.ndim
        x       = reduce_x(target,ncomp)
        pts     = self.ledger.global_points(facet.point_ids)
        w       = lever_rule(pts[:,:-1],x,eps=self.eps)
        if candidate is not None:
            candidate.weights = w
        amounts = {}
        for i,ipt in enumerate(facet.point_ids):
            ipt          = int(ipt)
            phase,offset = self.index.lookup(ipt)
            amounts[ipt] = PhaseAmount(point_id=ipt,phase=phase,offset=offset,
                                       internal_coords=self.ledger.find_internal_point(ipt),
                                       x=complete_x(pts[i,:-1],ncomp),G=float(pts[i,-1]),
                                       fraction=float(w[i]))
        return amounts
