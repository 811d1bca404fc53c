from setuptools import setup

setup(
    name='phasemap',
    version='0.1.0',    
    description='Mapping phase-internal states onto a global convex hull for phase equilibria',
    url='https://github.com/dullemond/phasemap',
    author='Cornelis Dullemond',
    author_email='dullemond@uni-heidelberg.de',
    license='MIT',
    packages=['phasemap'],
    install_requires=['scipy',
                      'numpy',
                      'matplotlib',
                      'pandas'
                      ],
    extras_require={'test':['pytest']},
)
