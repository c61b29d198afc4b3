import os
from setuptools import setup, find_packages


version = None
with open(os.path.join('pyaa', '__init__.py'), 'r') as fid:
    for line in (line.strip() for line in fid):
        if line.startswith('__version__'):
            version = line.split('=')[1].strip().strip('\'')
            break
if version is None:
    raise RuntimeError('Could not determine version')

DISTNAME = 'pyaa'
DESCRIPTION = 'Safeguarded Anderson acceleration of fixed-point iterations'
with open('README.md', 'r', encoding='utf-8') as f:
    LONG_DESCRIPTION = f.read()
LICENSE = 'BSD (3-clause)'
VERSION = version

setup(name=DISTNAME,
      version=version,
      description=DESCRIPTION,
      long_description=LONG_DESCRIPTION,
      long_description_content_type='text/markdown',
      license=LICENSE,
      packages=find_packages(exclude=['examples']),
      install_requires=['numpy>=1.12', 'numba',
                        'scipy>=0.18.0', 'scikit-learn>=1.6'],
      extras_require={
          'test': ['pytest'],
          'doc': ['matplotlib'],
      },
      )
