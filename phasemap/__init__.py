from .phasemap import PhaseHullMap,EquilibriumResult
from .phasemap_errors import *
from .phasemap_ledger import PointLedger
from .phasemap_index import PhaseIndex
from .phasemap_hull import HullBuilder,Facet
from .phasemap_selector import CandidateSelector,Candidate,ActivityConstraint
from .phasemap_lever import LeverSolver,PhaseAmount
from .phasemap_phases import *
from .phasemap_minimizer import HullMinimizer
from .phasemap_support import *

__all__ = ["PhaseHullMap","EquilibriumResult","PointLedger","PhaseIndex","HullBuilder","Facet",
           "CandidateSelector","Candidate","ActivityConstraint","LeverSolver","PhaseAmount",
           "StoichiometricPhase","SolutionPhase","HullMinimizer",
           "PhaseMapError","NotFound","OutOfRange","DegenerateHull","NoFeasibleCandidate",
           "SingularSystem","InfeasibleWeights"]
__version__ = "0.1.0"
__author__ = 'Cornelis Dullemond'
__credits__ = 'Heidelberg University, Germany'
