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
from .phasemap_errors import SingularSystem
from .phasemap_support import Rgas, reduce_x, barycentric_weights, chemical_potentials_from_plane

logger = logging.getLogger(__name__)

class Candidate(object):
    """
    A facet of the lower hull that contains the target composition and
    satisfies all activity constraints. The weights (phase fractions) are
    filled in by the LeverSolver.
    """
    def __init__(self,facet,mu=None,weights=None):
        self.facet   = facet
        self.mu      = mu
        self.weights = weights

    @property
    def point_ids(self):
        return self.facet.point_ids

    def __repr__(self):
        return f'Candidate(point_ids={list(self.facet.point_ids)}, weights={self.weights})'

class ActivityConstraint(object):
    """
    A half-space condition on a quantity derived from the tangent plane of a
    facet, at the target composition.

    Arguments:

      component    Index of the component, or its name (if the selector
                   knows the component names).

      bound        The bound.

    Optional:

      sense        '<=' (quantity must be <= bound) or '>='.

      kind         'activity' : the activity a_i = exp((mu_i-mu0)/(R*T))
                   'mu'       : the chemical potential mu_i itself [J/mol]

      mu0          Reference chemical potential of the component, for 'activity'.

      T            Temperature in Kelvin, required for 'activity'.

      tol          Absolute tolerance on the comparison.

    Example: the activity of SiO2 (component 1) must not exceed 0.5:

      ActivityConstraint(1,0.5,'<=',mu0=mu0_SiO2,T=1800.)
    """
    def __init__(self,component,bound,sense='<=',kind='activity',mu0=0.,T=None,tol=0.):
        assert sense in ['<=','>='], f'Error: Unknown sense {sense} (use <= or >=)'
        assert kind in ['activity','mu'], f'Error: Unknown kind {kind} (use activity or mu)'
        if kind=='activity':
            assert T is not None and T>0, 'Error: An activity constraint needs a temperature T>0.'
        self.component = component
        self.bound     = bound
        self.sense     = sense
        self.kind      = kind
        self.mu0       = mu0
        self.T         = T
        self.tol       = tol

    def value(self,mu,components=None):
        """
        The constrained quantity for the chemical potential vector mu.
        """
        icomp = self.component
        if isinstance(icomp,str):
            assert components is not None, f'Error: Component {icomp} given by name, but component names unknown.'
            assert icomp in components, f'Error: Component {icomp} is not one of {list(components)}.'
            icomp = list(components).index(icomp)
        if self.kind=='mu':
            return mu[icomp]
        return np.exp((mu[icomp]-self.mu0)/(Rgas*self.T))

    def is_satisfied(self,mu,components=None):
        q = self.value(mu,components=components)
        if self.sense=='<=':
            return q<=self.bound+self.tol
        return q>=self.bound-self.tol

class CandidateSelector(object):
    """
    Find the facet(s) of the lower hull that contain the target composition.

    A facet contains the target if the barycentric weights of the target with
    respect to the corner compositions are all >= -eps. If the target lies
    exactly on a ridge between facets, all of these facets are returned: it
    is up to the caller to choose. An empty list means no facet contains
    the target (e.g. it lies outside of the sampled domain).

    Arguments:

      ledger       The PointLedger from which the facet corners are taken.

    Optional:

      components   Names of the components (to allow activity constraints
                   by component name).

      eps          Tolerance for the barycentric weights.
    """
    def __init__(self,ledger,components=None,eps=1e-9):
        self.ledger     = ledger
        self.components = components
        self.eps        = eps

    def facet_compositions(self,facet):
        """
        The independent mole fractions x[:-1] of the corners of the facet.
        """
        return self.ledger.global_points(facet.point_ids)[:,:-1]

    def facet_chemical_potentials(self,facet):
        """
        The chemical potentials of all components according to the tangent
        plane of this facet.
        """
        return chemical_potentials_from_plane(facet.normal,facet.offset)

    def select(self,facets,target,activity_constraints=None):
        """
        Arguments:

          facets                  List of Facet records from the HullBuilder.

          target                  The composition (full x or x[:-1]).

          activity_constraints    List of ActivityConstraint (optional).

        Returns:

          candidates              List of Candidate objects (without weights).
        """
        if activity_constraints is None:
            activity_constraints = []
        x          = reduce_x(target,self.ledger.ndim)
        candidates = []
        for ifacet,facet in enumerate(facets):
            try:
                w = barycentric_weights(self.facet_compositions(facet),x)
            except SingularSystem:
                logger.debug(f'Skipping facet {ifacet}: corners are affinely dependent.')
                continue
            if w.min()<-self.eps:
                continue
            mu = self.facet_chemical_potentials(facet)
            ok = True
            for con in activity_constraints:
                if not con.is_satisfied(mu,components=self.components):
                    logger.debug(f'Facet {ifacet} contains the target, but violates {con.kind} constraint on component {con.component}.')
                    ok = False
                    break
            if ok:
                candidates.append(Candidate(facet,mu=mu))
        return candidates
