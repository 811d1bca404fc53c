# Model of a binary system A-B with a regular solution liquid (with a
# miscibility gap below T = W/(2R)), an ordered phase A(1)B(1) on two
# sublattices, and two line compounds.
#
# The phases are sampled on a grid in their own internal coordinates, all
# points are mapped to the [x_A,G] plane, and the lower convex hull gives the
# equilibrium for any mean composition. For each stable phase we then also
# get its internal state (e.g. the site fractions of the ordered phase).
#
import logging
import numpy as np
import phasemap as pm
import matplotlib.pyplot as plt

logging.basicConfig(level=logging.INFO)

#----------------------------------------------------------------------------------
#                               Setup the problem
#----------------------------------------------------------------------------------

Tc         = 600.
Tk         = Tc + 273.15
T          = Tk

components = ['A','B']
Rgas       = pm.Rgas
W_liq      = 20000.    # Gives a miscibility gap below ~1203 K
W_ord      = -30000.

def xlogx(x):
    return np.where(x>0,x*np.log(np.where(x>0,x,1.)),0.)

def Gfunc_liq(y,T=T):
    yA = y[:,0]
    yB = y[:,1]
    return W_liq*yA*yB + Rgas*T*( xlogx(yA) + xlogx(yB) )

def Gfunc_ord(y,T=T):
    # Sublattice 1: (A,B), sublattice 2: (A,B). Site fractions y = [yA1,yB1,yA2,yB2].
    Gref = 4000. + 2000.*(y[:,0]*y[:,2]+y[:,1]*y[:,3])
    Gord = W_ord*y[:,0]*y[:,3]
    Smix = xlogx(y[:,0]) + xlogx(y[:,1]) + xlogx(y[:,2]) + xlogx(y[:,3])
    return Gref + Gord + Rgas*T*Smix

liq        = pm.SolutionPhase('liquid',components,Gfunc_liq,
                              resetfunc=lambda T,P: {'T':T})
ordered    = pm.SolutionPhase('ordered',components,Gfunc_ord,
                              sublattices=[(1,['A','B']),(1,['A','B'])],
                              resetfunc=lambda T,P: {'T':T})
c1         = pm.StoichiometricPhase('AB3',components,[0.25,0.75],-4500.)
c2         = pm.StoichiometricPhase('A3B',components,[0.75,0.25],-3500.)

#----------------------------------------------------------------------------------
#                         Now start the PhaseMap part
#----------------------------------------------------------------------------------

hm         = pm.HullMinimizer(components,[liq,ordered,c1,c2],T=T,P=1.,nres=60,nworkers=4)

print(f'Stable phases at T = {Tk:.0f} K: {hm.stable_phases()}')

for xA in [0.1,0.3,0.5,0.7,0.9]:
    res = hm.solve_equilibrium([xA,1-xA])
    print(f'x_A = {xA:.2f}: {res}')
    if res.success:
        for p in res.phases:
            print(f'    {p.phase:8s} fraction = {p.fraction:.4f}   x = {p.x}   internal = {p.internal_coords}')

df = hm.hmap.to_dataframe()
print(df[df['on_hull']])

plt.figure()
pm.plot_binary_hull(hm.hmap,Gscale=1e3,components=components)
plt.ylabel(r'$G$ [kJ/mol]')
plt.text(0.75,plt.gca().get_ylim()[1] - 0.3,f'T = {Tk:.0f} K ({Tc:.0f} C)')
plt.savefig(f'fig_{components[0]}_{components[1]}_x_G_T={Tk:.0f}.pdf')
plt.show()
