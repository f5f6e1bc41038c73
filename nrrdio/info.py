"""Define static nrrdio metadata for nrrdio

The long description parameter is used in the nrrdio top-level docstring.
We exec this file in ``setup.py``, so it cannot import nrrdio or use relative
imports.
"""

__version__ = '1.0.0'

long_description = """
Read and write NRRD_ ("nearly raw raster data") image files: a text header
describing the array shape, sample type and physical calibration, followed by
a raw or gzip-compressed binary payload, either in the same file (``.nrrd``)
or in a separate data file (detached ``.nhdr`` header).

nrrdio gives access to the parsed header fields, reads and writes image data
as NumPy arrays with channel, X, Y, Z and time axes, converts between NRRD
space fields and pixel-based calibration, and can write one file per index of
chosen axes.

.. _NRRD: https://teem.sourceforge.net/nrrd/format.html

Installation
============

To install with ``pip``, run::

   pip install .

Testing
=======

To test an installed version of nrrdio, install the test dependencies
and run pytest_::

    pip install nrrdio[test]
    pytest --pyargs nrrdio

.. _pytest: https://docs.pytest.org

License
=======

nrrdio is licensed under the terms of the MIT license.  For more information,
please see the COPYING file.
"""
