#!/usr/bin/env python
# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""
Setuptools entrypoint

This file should not be run directly. To install, use:

    pip install .

To build a package for distribution, use:

    pip install --upgrade build
    python -m build

"""
import os

from setuptools import find_packages, setup

# Get version and long description from the info module, without importing
# the package
INFO_VARS = {}
with open(os.path.join('nrrdio', 'info.py')) as fobj:
    exec(fobj.read(), INFO_VARS)

setup(
    name='nrrdio',
    version=INFO_VARS['__version__'],
    description='Read and write NRRD image files',
    long_description=INFO_VARS['long_description'],
    long_description_content_type='text/x-rst',
    author='nrrdio developers',
    license='MIT License',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
    ],
    python_requires='>=3.8',
    install_requires=['numpy >=1.20'],
    extras_require={
        'test': ['pytest'],
    },
    packages=find_packages(include=['nrrdio', 'nrrdio.*']),
    package_data={'nrrdio': ['tests/data/*']},
    entry_points={
        'console_scripts': [
            'nrrd-ls=nrrdio.cmdline.ls:main',
            'nrrd-dx=nrrdio.cmdline.nrrd_dx:main',
        ],
    },
    zip_safe=False,
)
