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
import pandas as pd
from .phasemap_errors import DegenerateHull, NoFeasibleCandidate, SingularSystem, InfeasibleWeights
from .phasemap_ledger import PointLedger
from .phasemap_index import PhaseIndex
from .phasemap_hull import HullBuilder
from .phasemap_selector import CandidateSelector
from .phasemap_lever import LeverSolver
from .phasemap_support import reduce_x, complete_x, interpolate_on_simplex

logger = logging.getLogger(__name__)

class EquilibriumResult(object):
    """
    The outcome of PhaseHullMap.solve_equilibrium(). Either a success, in
    which case self.phases is the list of PhaseAmount records (one for each
    corner of the chosen facet), or a failure, in which case self.failure is
    the exception that describes what went wrong (DegenerateHull,
    NoFeasibleCandidate, SingularSystem or InfeasibleWeights) and
    self.phases is empty.

    If more than one facet contained the target, all of them are in
    self.candidates, and self.candidate is the one that was chosen.
    """
    def __init__(self,target,phases=None,candidate=None,candidates=None,failure=None):
        self.target     = target
        self.phases     = phases if phases is not None else []
        self.candidate  = candidate
        self.candidates = candidates if candidates is not None else []
        self.failure    = failure

    @property
    def success(self):
        return self.failure is None

    @property
    def kind(self):
        if self.failure is None:
            return 'ok'
        return self.failure.kind

    @property
    def fractions(self):
        return np.array([p.fraction for p in self.phases])

    def fraction_by_phase(self):
        """
        The summed fraction of each phase identity. Note that two corners can
        belong to the same phase identity (e.g. the two sides of a miscibility
        gap); they are added up here.
        """
        fr = {}
        for p in self.phases:
            fr[p.phase] = fr.get(p.phase,0.)+p.fraction
        return fr

    def to_dataframe(self):
        rows = []
        for p in self.phases:
            rows.append({'point_id':p.point_id,'phase':p.phase,'offset':p.offset,
                         'internal':p.internal_coords,'x':p.x,'G':p.G,'fraction':p.fraction})
        return pd.DataFrame(rows,columns=['point_id','phase','offset','internal','x','G','fraction'])

    def __repr__(self):
        if not self.success:
            return f'EquilibriumResult({self.kind}: {self.failure})'
        s = ', '.join([f'{p.phase}:{p.fraction:.4f}' for p in self.phases])
        return f'EquilibriumResult(ok: {s})'

class PhaseHullMap(object):
    """
    Keeps track of the points of all phases during one global minimization
    pass. The points of each phase are mapped to the global composition space,
    and a convex hull is computed there, which is stored as facets. The
    composition (and optionally activity) constraints are applied to the
    facets to locate the candidate. The point IDs of the corners of the
    candidate facet are used to find each corner's internal degrees of freedom:
    this is the state of that phase. With the lever rule we then find the
    phase fractions.

    A point in the global space is [x[0],...,x[ncomp-2],G], i.e. the
    independent mole fractions followed by the Gibbs energy.

    Optional:

      components      Names of the components (only for activity constraints
                      by name, and for the labels of to_dataframe()).

      eps             Tolerance for the barycentric weights, both in the
                      selection of the facet and in the lever rule.

      lower_tol       See HullBuilder.

      qhull_options   See HullBuilder.

      check           If True, check ledger/index consistency before the
                      hull is computed.

    Usage:

      hmap = PhaseHullMap(['A','B'])
      hmap.add_phase_points('alpha',yalpha,ptsalpha)
      hmap.add_phase_points('beta',ybeta,ptsbeta)
      res  = hmap.solve_equilibrium([0.4,0.6])
      if res.success:
          for p in res.phases: print(p.phase,p.internal_coords,p.fraction)
    """
    def __init__(self,components=None,eps=1e-9,lower_tol=1e-12,qhull_options=None,check=True):
        self.components = components
        self.eps        = eps
        self.check      = check
        self.ledger     = PointLedger()
        self.index      = PhaseIndex()
        self.builder    = HullBuilder(lower_tol=lower_tol,qhull_options=qhull_options)
        self.selector   = CandidateSelector(self.ledger,components=components,eps=eps)
        self.solver     = LeverSolver(self.ledger,self.index,eps=eps)
        self.reset()

    def reset(self):
        """
        Start a new pass: all points and the hull are thrown away.
        """
        self.ledger.reset()
        self.index.reset()
        self.facets       = None
        self.hull_failure = None

    @property
    def ncomp(self):
        return self.ledger.ndim

    def add_phase_points(self,phase,internal_points,global_points):
        """
        Add all points of one phase. The points are appended to the ledger,
        and then the phase boundary is recorded in the index, so the points of
        different phases cannot get interleaved.

        Arguments:

          phase             The phase identity.

          internal_points   Sequence of internal coordinate vectors (one per
                            point). Can be a 2D array.

          global_points     Array pts[npts,ncomp] of global points, in the
                            same order.

        Returns:

          ids               The range of point IDs of this phase.
        """
        assert self.facets is None and self.hull_failure is None, 'Error: Cannot add points after the hull has been computed. Call reset() first.'
        assert len(internal_points)==len(global_points), 'Error: Number of internal and global points differ.'
        start = len(self.ledger)
        for yint,pglb in zip(internal_points,global_points):
            self.ledger.add_point(yint,pglb)
        self.index.add_phase_boundary(phase,len(self.ledger)-start)
        logger.debug(f'Added {len(self.ledger)-start} points of phase {phase}.')
        return range(start,len(self.ledger))

    def compute_hull(self):
        """
        Freeze the ledger and compute the lower convex hull of all points.
        Raises DegenerateHull if that fails.
        """
        if self.check:
            self.index.check_consistency(self.ledger)
        self.ledger.freeze()
        try:
            self.facets = self.builder.build(self.ledger.global_points())
        except DegenerateHull as e:
            self.hull_failure = e
            raise
        return self.facets

    def select_candidates(self,target,activity_constraints=None):
        """
        All facets that contain target and fulfill the constraints.
        """
        if self.facets is None:
            self.compute_hull()
        return self.selector.select(self.facets,target,activity_constraints=activity_constraints)

    def choose_candidate(self,candidates,target):
        """
        If the target lies on a ridge between facets, more than one facet is
        feasible. We then prefer the facet with the fewest distinct phases
        among its corners, then the one with the lowest G at the target (the
        facets should have the same G there, up to round-off), then the first.
        """
        x    = reduce_x(target,self.ncomp)
        best = None
        for icand,cand in enumerate(candidates):
            nphases = len(set([self.index.lookup(int(ipt))[0] for ipt in cand.point_ids]))
            pts     = self.ledger.global_points(cand.point_ids)
            G       = interpolate_on_simplex(x,pts[:,:-1],pts[:,-1])
            key     = (nphases,G,icand)
            if best is None or key<best[0]:
                best = (key,cand)
        return best[1]

    def solve_equilibrium(self,target,activity_constraints=None):
        """
        Find the equilibrium phase assemblage for the mean composition target
        (full x or x[:-1]).

        Returns:

          res      An EquilibriumResult. If res.success is False, then
                   res.failure tells what went wrong; the caller may then
                   want to sample more densely, or a wider domain.
        """
        if self.hull_failure is not None:
            return EquilibriumResult(target,failure=self.hull_failure)
        try:
            candidates = self.select_candidates(target,activity_constraints=activity_constraints)
        except DegenerateHull as e:
            logger.warning(f'No usable convex hull: {e}')
            return EquilibriumResult(target,failure=e)
        if len(candidates)==0:
            e = NoFeasibleCandidate(f'No facet of the hull contains composition {complete_x(reduce_x(target,self.ncomp),self.ncomp)}.',
                                    target=target,nfacets=len(self.facets))
            logger.info(str(e))
            return EquilibriumResult(target,failure=e)
        if len(candidates)>1:
            logger.debug(f'{len(candidates)} facets contain the target; choosing one.')
        cand = self.choose_candidate(candidates,target)
        try:
            amounts = self.solver.solve(cand,target)
        except (SingularSystem,InfeasibleWeights) as e:
            logger.warning(f'Lever rule failed: {e}')
            return EquilibriumResult(target,candidate=cand,candidates=candidates,failure=e)
        return EquilibriumResult(target,phases=list(amounts.values()),candidate=cand,candidates=candidates)

    # ------ Access to the points -----

    def find_internal_point(self,global_id):
        return self.ledger.find_internal_point(global_id)

    def find_global_point(self,internal_id):
        return self.ledger.find_global_point(internal_id)

    def lookup(self,global_id):
        return self.index.lookup(global_id)

    def points_of_phase(self,phase):
        """
        Returns:

          ids        The point IDs of this phase
          yint       List of the internal coordinates of these points
          pts        Array of the global points
        """
        ids = self.index.phase_range(phase)
        return ids,self.ledger.internal_points(ids),self.ledger.global_points(ids)

    def hull_point_ids(self):
        """
        The set of point IDs that are corners of at least one lower facet.
        """
        assert self.facets is not None, 'Error: First call compute_hull()'
        ids = set()
        for facet in self.facets:
            ids.update(int(i) for i in facet.point_ids)
        return ids

    def stable_phases(self):
        """
        Those phases that have at least one point on the bottom of the hull,
        in the order in which they were added.
        """
        ids    = self.hull_point_ids()
        stable = set([self.index.lookup(i)[0] for i in ids])
        return [ph for ph in self.index.phases if ph in stable]

    def to_dataframe(self):
        """
        All points of the ledger as a pandas DataFrame, one row per point.
        """
        ncomp  = self.ncomp
        if self.components is not None:
            xcols = ['x_'+str(c) for c in self.components]
        else:
            xcols = [f'x{i}' for i in range(ncomp or 0)]
        onhull = self.hull_point_ids() if self.facets is not None else set()
        rows   = []
        for ipt in range(len(self.ledger)):
            phase,offset = self.index.lookup(ipt)
            p            = self.ledger.find_global_point(ipt)
            row          = {'point_id':ipt,'phase':phase,'offset':offset,
                            'internal':self.ledger.find_internal_point(ipt)}
            for c,xc in zip(xcols,complete_x(p[:-1],ncomp)):
                row[c] = xc
            row['G']      = p[-1]
            row['on_hull'] = ipt in onhull
            rows.append(row)
        return pd.DataFrame(rows,columns=['point_id','phase','offset','internal']+xcols+['G','on_hull'])
