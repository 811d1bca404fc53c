#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#---------------------------------------------------------------------------

import numpy as np
import matplotlib.pyplot as plt
from scipy import linalg
from .phasemap_errors import SingularSystem, InfeasibleWeights

Rgas = 8.314  # J/mol·K

def complete_x(x,ncomp):
    """
    If x is (or maybe is) only the first n-1 elements where n is the number of
    components, then this function will return a new x that contains the complete
    set of components that sums up to 1. Note that x can either be one vector
    or an array of vectors.
    """
    x = np.array(x,dtype=float)
    if x.shape[-1]==ncomp-1:
        sh         = list(x.shape)
        sh[-1]    += 1
        xnew       = np.zeros(sh)
        xnew[...,:-1] = x
        xnew[...,-1]  = 1-x.sum(axis=-1)
        x = xnew
    assert x.shape[-1]==ncomp, f'Error: x has {x.shape[-1]} elements, but there are {ncomp} components.'
    return x

def reduce_x(x,ncomp):
    """
    The inverse of complete_x(): returns the independent mole fractions
    x[:-1], which is how compositions live in the global hull space. Both
    the full vector x[0:ncomp] (which must sum to 1) and the reduced vector
    x[0:ncomp-1] are accepted.
    """
    x = np.array(x,dtype=float)
    if x.ndim==0:
        x = x.reshape(1)
    if x.shape[-1]==ncomp:
        assert np.all(np.abs(x.sum(axis=-1)-1)<1e-6), 'Error: x does not sum to 1'
        x = x[...,:-1]
    assert x.shape[-1]==ncomp-1, f'Error: x has {x.shape[-1]} elements, but there are {ncomp} components.'
    return x

def barycentric_weights(xverts,x):
    """
    Suppose you have a substance at composition x between N points xverts
    (a tie line in a binary, a tie triangle in a ternary, in general a tie
    simplex). The weights w[0:N] with sum(w)==1 and sum(w*xverts)==x are
    computed here. This is the same linear system as in interpolate_on_simplex().

    Arguments:

      xverts[0:N,0:N-1]   The independent mole fractions of the N corners.
      x[0:N-1]            The independent mole fractions of the substance.

    Returns:

      w[0:N]              The weights. Not checked for positivity.

    Raises SingularSystem if the corners are affinely dependent.
    """
    xverts = np.array(xverts,dtype=float)
    x      = np.array(x,dtype=float).ravel()
    N      = len(xverts)
    assert xverts.shape==(N,N-1), f'Error: Need N corners with N-1 independent mole fractions, got shape {xverts.shape}.'
    assert len(x)==N-1, 'Error: Dimension of x does not match the corners.'
    evec = np.zeros((N-1,N-1))
    for i in range(N-1):
        evec[:,i] = xverts[i]-xverts[-1]
    rank = np.linalg.matrix_rank(evec)
    if rank<N-1:
        raise SingularSystem(f'Corners of the simplex are affinely dependent (rank {rank} < {N-1}).',rank=rank,xverts=xverts)
    y = linalg.solve(evec,x-xverts[-1])
    return np.hstack((y,1-y.sum()))

def lever_rule(xverts,x,eps=1e-9):
    """
    The lever rule, generalized to a tie simplex: the fractions w[0:N] of the
    N phases at the corners xverts, for a system with mean composition x.
    For a binary with xverts = [[0.2],[0.8]] and x = [0.5] this gives
    w = [0.5,0.5].

    Raises InfeasibleWeights if one of the weights is < -eps, i.e. x lies
    outside of the simplex. The weights are not clipped. The residual given
    with the exception is -min(w): how far x lies beyond the nearest face of
    the simplex, in units of barycentric weight.
    """
    w = barycentric_weights(xverts,x)
    if w.min()<-eps:
        raise InfeasibleWeights(f'Lever rule gives negative weight {w.min():.3e} (eps = {eps:.1e}): composition lies outside of the simplex.',
                                weights=w,residual=-w.min())
    return w

def interpolate_on_simplex(x,plane_x,plane_G):
    """
    The linearly interpolated G value at composition x on the simplex spanned
    by the points plane_x with energies plane_G.
    """
    w = barycentric_weights(plane_x,x)
    return (w*np.array(plane_G)).sum()

def chemical_potentials_from_plane(normal,offset):
    """
    The tangent plane construction: a hull facet with equation
    normal.[x[:-1],G] + offset = 0 is the plane G(x) = sum_i x_i mu_i
    (with the full x). Its values at the corners of the composition
    simplex are the chemical potentials mu_i of the components.
    """
    normal = np.array(normal,dtype=float)
    assert normal[-1]!=0, 'Error: Vertical plane has no chemical potentials.'
    mulast = -offset/normal[-1]
    mu     = mulast - normal[:-1]/normal[-1]
    return np.hstack((mu,mulast))

def generate_grid_on_simplex(N,nres):
    """
    A uniform grid on the simplex x.sum()==1 in N dimensions, with nres grid
    spacings between 0 and 1 along each axis.

    Arguments:

      N       The dimension of the space, i.e., the number of species
      nres    The number of grid spacings

    Returns:

      x       A 2D array x[0:ntot,N] with ntot = binom(nres+N-1,N-1).
    """
    assert N>=1, 'Error: Invalid N'
    assert nres>=1, 'Error: Invalid nres'
    if N==1:
        return np.ones((1,1))

    def grid_recursive(iprev):
        ilist = []
        imax  = nres-sum(iprev)
        for k in range(imax+1):
            ll = iprev+[k]
            if len(ll)==N-1:
                ilist.append(ll+[nres-sum(ll)])
            else:
                ilist += grid_recursive(ll)
        return ilist

    grid     = np.array(grid_recursive([]),dtype=int)
    x        = grid/nres
    x[:,-1]  = 1-x[:,:-1].sum(axis=-1)  # Once more normalization
    return x

#-----------------------------------------------------------------------
#                             Plotting
#-----------------------------------------------------------------------

def plot_binary_hull(hmap,ax=None,Gscale=1.,components=None,markers='.'):
    """
    Plot the points of all phases and the lower convex hull of a binary system,
    in the x-G plane. The x axis is the mole fraction of the first component.

    Arguments:

      hmap        A PhaseHullMap for which compute_hull() has been called.

    Optional:

      ax          The matplotlib axes to draw on (default: current axes).
      Gscale      Divide G by this for plotting (e.g. 1e3 for kJ/mol).
      components  Names of the two components, for the axis labels.
    """
    assert hmap.ledger.ndim==2, 'Error: plot_binary_hull() only works for binary systems.'
    if ax is None:
        ax = plt.gca()
    for phase in hmap.index.phases:
        pts = hmap.ledger.global_points(hmap.index.phase_range(phase))
        ax.plot(pts[:,0],pts[:,1]/Gscale,markers,label=str(phase))
    if hmap.facets is not None:
        for facet in hmap.facets:
            pts = hmap.ledger.global_points(facet.point_ids)
            ax.plot(pts[:,0],pts[:,1]/Gscale,'-',color='black')
    if components is not None:
        ax.set_xlabel('x('+latexify_chemical_formula(components[0])+')')
    else:
        ax.set_xlabel('x')
    ax.set_ylabel('G')
    ax.legend()
    return ax

#----------------------------------------------------------------------------------
#                            Miscellaneous stuff
#----------------------------------------------------------------------------------
def latexify_chemical_formula(s):
    i = 0
    s = s+' '
    for k in range(1000):
        if i>=len(s):
            break
        if s[i].isnumeric():
            s=s[:i]+r'$_{'+s[i:]
            i+=4
            while s[i].isnumeric(): i+=1
            s=s[:i]+r'}$'+s[i:]
            i+=2
        i+=1
    s=s.strip()
    return s
