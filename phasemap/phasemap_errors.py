#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#
# The failure kinds of PhaseMap. NotFound and OutOfRange are programming
# errors and simply propagate. The other ones describe a pass that did not
# give a usable equilibrium (e.g. the sampling was too coarse, or the target
# lies outside of the sampled domain). PhaseHullMap.solve_equilibrium()
# catches those and hands them to the caller as a failed EquilibriumResult,
# so that the caller can decide to re-sample.
#---------------------------------------------------------------------------

class PhaseMapError(Exception):
    kind = 'PhaseMapError'

class NotFound(PhaseMapError,KeyError):
    """
    A point ID or phase identity that was never inserted.
    """
    kind = 'NotFound'

    def __str__(self):
        # KeyError would otherwise print the repr of the message
        return Exception.__str__(self)

class OutOfRange(PhaseMapError,IndexError):
    """
    A PhaseIndex lookup beyond the last recorded threshold.
    """
    kind = 'OutOfRange'

class DegenerateHull(PhaseMapError):
    """
    The hull builder did not give any usable (lower) facet, or a facet
    turned out to have affinely dependent vertices.
    """
    kind = 'DegenerateHull'

class NoFeasibleCandidate(PhaseMapError):
    """
    No facet of the hull contains the target composition (or none of them
    satisfies the activity constraints).
    """
    kind = 'NoFeasibleCandidate'

    def __init__(self,message,target=None,nfacets=0):
        super().__init__(message)
        self.target  = target
        self.nfacets = nfacets

class SingularSystem(DegenerateHull):
    """
    The lever rule system of a facet cannot be solved, because the vertex
    compositions are affinely dependent.
    """
    kind = 'SingularSystem'

    def __init__(self,message,rank=None,xverts=None):
        super().__init__(message)
        self.rank   = rank
        self.xverts = xverts

class InfeasibleWeights(PhaseMapError):
    """
    The lever rule gave a weight below -eps: the target is not inside the
    facet. The weights and the residual (-min(weights), i.e. by how much
    the target misses the facet) are kept for diagnosis.
    """
    kind = 'InfeasibleWeights'

    def __init__(self,message,weights=None,residual=None):
        super().__init__(message)
        self.weights  = weights
        self.residual = residual
