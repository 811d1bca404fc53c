#---------------------------------------------------------------------------
#                  Part of PhaseMap, a simple python package
#          to map phase-internal states onto a global convex hull
#
#                           (C) C. P. Dullemond
#                      Heidelberg University, Germany
#                               October 2026
#---------------------------------------------------------------------------

import logging
from collections import namedtuple
import numpy as np
from scipy.spatial import ConvexHull, QhullError
from .phasemap_errors import DegenerateHull

logger = logging.getLogger(__name__)

# One facet (simplex) of the bottom of the convex hull:
#
#   point_ids    The d point IDs of the corners (IDs in the PointLedger)
#   normal       The outward unit normal of the supporting hyperplane
#   offset       The offset of the hyperplane: normal.p + offset = 0
#   neighbors    Positions (in the returned facet list) of the neighboring
#                lower facets. Neighbors at the top of the hull are left out.
#   id_qhull     The index of this simplex in the Qhull results
Facet = namedtuple('Facet',['point_ids','normal','offset','neighbors','id_qhull'])

def _readonly(a):
    a = np.array(a)
    a.setflags(write=False)
    return a

class HullBuilder(object):
    """
    Thin layer around scipy.spatial.ConvexHull (i.e. Qhull). The points are
    in [x[:-1],G]-space, with the Gibbs energy as the last coordinate. We
    are interested only in the lower facets (simplices), as they represent,
    for each x, the lowest Gibbs energy. The convex hull also has upper facets.
    They can be recognized by checking the last (=G) element of the facet
    normal vectors. We remove these, so that only the bottom of the hull is
    left.

    Optional:

      lower_only      If False, return all facets of the hull.

      lower_tol       A facet is a lower facet if the G component of its
                      (unit) normal is < -lower_tol. Vertical facets (e.g.
                      between two points with the same x) are thus excluded.

      qhull_options   Passed on to ConvexHull.
    """
    def __init__(self,lower_only=True,lower_tol=1e-12,qhull_options=None):
        self.lower_only    = lower_only
        self.lower_tol     = lower_tol
        self.qhull_options = qhull_options

    def build(self,points,point_ids=None):
        """
        Compute the (lower) convex hull.

        Arguments:

          points      Array pts[npts,d] of global points.

          point_ids   If the points are a selection from the ledger, the
                      point ID of each row of points. Default: the row index
                      itself is the point ID.

        Returns:

          facets      List of Facet records, with point IDs (not row indices).

        Raises DegenerateHull if no usable facet can be found.
        """
        points = np.array(points,dtype=float)
        if points.ndim!=2 or len(points)==0:
            raise DegenerateHull('Empty point set: cannot compute a convex hull.')
        npts,ndim = points.shape
        if point_ids is None:
            point_ids = np.arange(npts)
        point_ids = np.array(point_ids,dtype=int)
        assert len(point_ids)==npts, 'Error: point_ids must have one entry per point.'
        keep = np.all(np.isfinite(points),axis=1)
        if not np.all(keep):
            logger.info(f'Excluding {npts-keep.sum()} points with non-finite coordinates from the hull.')
            points    = points[keep]
            point_ids = point_ids[keep]
            npts      = len(points)
        if ndim<2:
            raise DegenerateHull(f'A hull in {ndim} dimension(s) has no lower facets.')
        if npts<ndim+1:
            raise DegenerateHull(f'Need at least {ndim+1} points for a hull in {ndim} dimensions, got {npts}.')
        try:
            hull = ConvexHull(points,qhull_options=self.qhull_options)
        except QhullError as e:
            raise DegenerateHull(f'Qhull failed: {str(e).strip().splitlines()[0]}') from e
        if self.lower_only:
            include = hull.equations[:,-2]<-self.lower_tol
        else:
            include = np.ones(len(hull.simplices),dtype=bool)
        simindices = {}
        for isim in np.where(include)[0]:
            simindices[isim] = len(simindices)
        facets = []
        for isim in simindices:
            neighbors = [simindices[k] for k in hull.neighbors[isim] if k in simindices]
            facets.append(Facet(point_ids=_readonly(point_ids[hull.simplices[isim]]),
                                normal=_readonly(hull.equations[isim,:-1]),
                                offset=float(hull.equations[isim,-1]),
                                neighbors=tuple(neighbors),
                                id_qhull=int(isim)))
        if len(facets)==0:
            raise DegenerateHull('The convex hull has no lower facets.')
        logger.info(f'Convex hull of {npts} points: {len(hull.simplices)} facets, of which {len(facets)} kept.')
        return facets
