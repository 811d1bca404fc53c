#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#
# The phases that deliver points to the PhaseHullMap. Each phase has its
# own internal coordinates (for a solution phase: the site fractions on
# its sublattices; for a stoichiometric phase: nothing) and knows how to
# map these to the global composition x of the system. The Gibbs energy
# function itself is always provided by the user.
#---------------------------------------------------------------------------

import itertools
import numpy as np
import pandas as pd
from .phasemap_support import generate_grid_on_simplex

class StoichiometricPhase(object):
    """
    A phase with a fixed composition (a crystal with a well-defined
    stoichiometry). It is a single point in the phase diagram, and has no
    internal degrees of freedom.

    Arguments:

      name         Name of the phase, e.g. 'Fo' or 'Mg2SiO4'.

      components   List of names of the components.

      x            The composition x[0:ncomp] in mole fractions of components
                   (must sum to 1).

      G            The Gibbs energy per mole of components (i.e. what
                   PhaseHull calls mfDfG).

    Optional:

      resetfunc    A function with arguments (T,P) that returns the new G.
    """
    def __init__(self,name,components,x,G,resetfunc=None):
        self.name       = name
        self.components = list(components)
        self.x          = np.array(x,dtype=float)
        self.G          = float(G)
        self.reset      = resetfunc
        assert len(self.x)==len(self.components), f'Error: Composition of {name} has wrong number of components.'
        assert np.abs(self.x.sum()-1)<1e-6, f'Error: Composition of {name} does not sum to 1.'

    def __repr__(self):
        return f'StoichiometricPhase({self.name})'

    @property
    def ninternal(self):
        return 0

    def call_reset(self,T,P):
        if self.reset is not None:
            self.G = float(self.reset(T,P))

    def sample_internal(self,nres=None):
        return np.zeros((1,0))

    def internal_to_global_x(self,y):
        y = np.array(y,dtype=float)
        n = len(y) if y.ndim==2 else 1
        return np.tile(self.x,(n,1))

    def global_points(self,y):
        x        = self.internal_to_global_x(y)
        pts      = np.zeros_like(x)
        pts[:,:-1] = x[:,:-1]
        pts[:,-1]  = self.G
        return pts

class SolutionPhase(object):
    """
    A phase with a variable composition: a liquid, an alloy, a glass or a
    solid solution with one or more sublattices. Its internal coordinates
    are the site fractions y on all sublattices, concatenated. For instance
    a phase (Fe,Ni)1(C,Va)3 has sublattices [(1,['Fe','Ni']),(3,['C','Va'])]
    and the internal coordinates y = [yFe,yNi,yC,yVa].

    Arguments:

      name         The name of this phase.

      components   List of names of the components of the (global) system.

      Gfunc        A Python function for G(y) where y is a 2D array y[N,M],
                   with M the number of internal coordinates and N the number
                   of points. It must return an array of N values: the Gibbs
                   energy per mole of formula units. For a liquid (no
                   sublattices) a formula unit is one mole of components,
                   so this is just G(x).

    Optional:

      sublattices  List of (site_ratio,species) tuples. Species which are
                   not a component (e.g. 'Va' for vacancies) do not
                   contribute to the composition. Default: a single sublattice
                   with all components, i.e. y == x.

      kwforGfunc   A dictionary of keyword arguments for Gfunc.

      resetfunc    A function with arguments (T,P) that reconfigures Gfunc for
                   the new temperature and pressure. If it returns a
                   dictionary, that is stored as the new kwforGfunc (as in
                   PhaseHull's Liquid.call_reset()).
    """
    def __init__(self,name,components,Gfunc,sublattices=None,kwforGfunc=None,resetfunc=None):
        self.name         = name
        self.components   = list(components)
        self.Gfunc        = Gfunc
        self.kwforGfunc   = kwforGfunc
        self.reset        = resetfunc
        if sublattices is None:
            sublattices   = [(1.,self.components)]
        self.sublattices  = [(float(a),list(species)) for a,species in sublattices]
        for a,species in self.sublattices:
            assert a>0, f'Error: Site ratio of a sublattice of {name} must be >0.'
            assert len(species)>0, f'Error: Empty sublattice in {name}.'

        # Conversion matrix from site fractions to moles of components per formula unit
        nu = []
        for a,species in self.sublattices:
            for s in species:
                col = np.zeros(len(self.components))
                if s in self.components:
                    col[self.components.index(s)] = a
                nu.append(col)
        self.nu = np.array(nu)
        assert self.nu.sum(axis=0).max()>0, f'Error: Phase {name} contains none of the components.'

    def __repr__(self):
        return f'SolutionPhase({self.name})'

    @property
    def ninternal(self):
        return len(self.nu)

    def call_Gfunc(self,y):
        y = np.array(y,dtype=float)
        if len(y.shape)==1:
            y = np.array([y,])
        assert y.shape[-1]==self.ninternal, f'Error: Phase {self.name} has {self.ninternal} internal coordinates.'
        if self.kwforGfunc is not None:
            G = self.Gfunc(y,**self.kwforGfunc)
        else:
            G = self.Gfunc(y)
        return np.array(G,dtype=float).ravel()

    def call_reset(self,T,P):
        if self.reset is not None:
            kw = self.reset(T,P)
            if kw is not None:
                self.kwforGfunc = kw

    def moles_per_formula_unit(self,y):
        """
        The number of moles of components n[N,ncomp] in one formula unit.
        """
        y = np.array(y,dtype=float).reshape(-1,self.ninternal)
        return y@self.nu

    def internal_to_global_x(self,y):
        """
        The mole fractions x[N,ncomp] for site fractions y[N,M]. Points with
        only vacancies have no composition; they get nan.
        """
        n    = self.moles_per_formula_unit(y)
        ntot = n.sum(axis=-1)
        x    = np.full_like(n,np.nan)
        ok   = ntot>0
        x[ok] = n[ok]/ntot[ok,None]
        return x

    def global_points(self,y):
        """
        The points [x[:-1],G] for the hull, with G per mole of components.
        """
        y          = np.array(y,dtype=float).reshape(-1,self.ninternal)
        n          = self.moles_per_formula_unit(y)
        ntot       = n.sum(axis=-1)
        x          = self.internal_to_global_x(y)
        G          = self.call_Gfunc(y)
        pts        = np.zeros_like(x)
        pts[:,:-1] = x[:,:-1]
        pts[:,-1]  = np.where(ntot>0,G/np.where(ntot>0,ntot,1.),np.nan)
        return pts

    def sample_internal(self,nres):
        """
        A regular grid in the site fractions: the product of a grid on the
        simplex of each sublattice, with nres grid spacings.
        """
        grids = [generate_grid_on_simplex(len(species),nres) for a,species in self.sublattices]
        y     = [np.hstack(combi) for combi in itertools.product(*grids)]
        return np.stack(y)

    def compute_mu0(self):
        """
        The Gibbs energy of the pure components in this phase (only for phases
        with a single sublattice containing all components), to be used as
        the reference for activities.
        """
        assert len(self.sublattices)==1 and self.sublattices[0][1]==self.components, \
            'Error: compute_mu0() only works for a single sublattice with all components.'
        a = self.sublattices[0][0]
        return self.call_Gfunc(np.eye(len(self.components)))/a

def sample_internal_grid(phase,nres):
    """
    The default sampling policy: a regular grid in the internal coordinates.
    """
    return phase.sample_internal(nres)

def phases_from_crystal_database(dbase,components):
    """
    Read a database of fixed stoichiometry phases into a list of
    StoichiometricPhase objects.

    Arguments:

      dbase        Either a string containing the name of the .csv or
                   fixed-width-format file containing the database, or
                   a Pandas DataFrame. Required columns: 'Abbrev' (name),
                   'mfDfG' (G per mole of components), and either 'x' (a
                   composition vector per row) or one column per component
                   with its mole fraction.

      components   List of names of the components.
    """
    if type(dbase) is str:
        if dbase[-4:]=='.csv':
            dbase = pd.read_csv(dbase)
        elif dbase[-4:]=='.fwf':
            dbase = pd.read_fwf(dbase)
        else:
            raise ValueError(f'Do not know how to read {dbase}')
    elif type(dbase)!=pd.DataFrame:
        raise ValueError('Error: dbase must be a pandas DataFrame')
    phases = []
    for i,row in dbase.iterrows():
        if 'x' in dbase.columns:
            x = np.array(row['x'],dtype=float)
        else:
            x = np.array([row[c] for c in components],dtype=float)
        phases.append(StoichiometricPhase(row['Abbrev'],components,x,row['mfDfG']))
    return phases
