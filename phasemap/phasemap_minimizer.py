#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#---------------------------------------------------------------------------

import logging
from concurrent.futures import ThreadPoolExecutor
from .phasemap import PhaseHullMap
from .phasemap_errors import DegenerateHull
from .phasemap_phases import sample_internal_grid

logger = logging.getLogger(__name__)

class HullMinimizer(object):
    """
    One global minimization pass: sample every phase in its own internal
    coordinates, map all points into the global [x[:-1],G] space, compute the
    convex hull, and from there find the equilibrium for any mean composition.

    Arguments:

      components   List of names of the components of the system.

      phases       List of phase objects (StoichiometricPhase, SolutionPhase,
                   or anything with the same interface: name, call_reset(T,P),
                   sample_internal(nres), global_points(y)).

    Optional:

      T            Temperature in Kelvin

      P            Pressure in bar

      nres         Grid resolution of the default sampler (nr of grid spacings
                   between 0 and 1 for the site fractions of each sublattice).

      eps          Tolerance for the barycentric weights and the lever rule.

      sampler      A function sampler(phase,nres) returning the internal
                   coordinates y[N,M] at which the phase is evaluated. Default
                   is the regular grid of sample_internal_grid().

      nworkers     If >1, the phases are sampled and evaluated in parallel
                   threads. The points are added to the map in the order of
                   the phases list in any case.

      nocompute    If True, do not start the computation right away.

      qhull_options  Passed on to the HullBuilder.

    Usage:

      hm  = HullMinimizer(['Ag','Cu'],[fcc,liq],T=1000.)
      res = hm.solve_equilibrium([0.5,0.5])
    """
    def __init__(self,components,phases,T=None,P=None,nres=20,eps=1e-9,sampler=None,
                 nworkers=1,nocompute=False,qhull_options=None):
        self.components = list(components)
        if type(phases) is not list:
            phases = [phases]
        names = [ph.name for ph in phases]
        assert len(set(names))==len(names), f'Error: Phase names must be unique, got {names}'
        for ph in phases:
            assert list(ph.components)==self.components, f'Error: Phase {ph.name} has components {ph.components}, the system has {self.components}.'
        self.phases     = phases
        self.T          = T
        self.P          = P
        self.nres       = nres
        self.sampler    = sampler if sampler is not None else sample_internal_grid
        self.nworkers   = nworkers
        self.hmap       = PhaseHullMap(self.components,eps=eps,qhull_options=qhull_options)
        if T is not None or P is not None:
            for ph in self.phases:
                ph.call_reset(T,P)
        if not nocompute:
            self.compute()

    def reset(self,T,P=1,nocompute=False):
        """
        Redo the pass at another temperature T [K] and pressure P [bar].
        """
        self.T = T
        self.P = P
        for ph in self.phases:
            ph.call_reset(T,P)
        if not nocompute:
            self.compute()

    def sample_phase(self,phase):
        """
        Returns the internal coordinates y[N,M] and global points pts[N,ncomp]
        of one phase.
        """
        y   = self.sampler(phase,self.nres)
        pts = phase.global_points(y)
        return y,pts

    def compute(self):
        """
        The full pass: sampling, merging into the map, and the convex hull.
        A degenerate hull is not raised here; it is reported by
        solve_equilibrium().
        """
        self.hmap.reset()
        if self.nworkers>1:
            with ThreadPoolExecutor(max_workers=self.nworkers) as executor:
                batches = list(executor.map(self.sample_phase,self.phases))
        else:
            batches = [self.sample_phase(ph) for ph in self.phases]
        for ph,(y,pts) in zip(self.phases,batches):
            self.hmap.add_phase_points(ph.name,y,pts)
        logger.info(f'Sampled {len(self.hmap.ledger)} points in {len(self.phases)} phases (T={self.T}, P={self.P}).')
        try:
            self.hmap.compute_hull()
        except DegenerateHull as e:
            logger.warning(f'Convex hull is degenerate: {e}')

    def solve_equilibrium(self,target,activity_constraints=None):
        """
        See PhaseHullMap.solve_equilibrium().
        """
        return self.hmap.solve_equilibrium(target,activity_constraints=activity_constraints)

    def stable_phases(self):
        if self.hmap.facets is None:
            return []
        return self.hmap.stable_phases()
