# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Package-wide defaults for NRRD header checking and logging

``error_level`` is the problem level at which a header check raises instead
of only logging (see :mod:`nrrdio.batteryrunners`).  With the default of 40,
a missing ``type`` raises, while a missing ``endian`` for a 16-bit image is
logged at level 30 and fixed by assuming little endian.  Set it to 30 to make
such problems fatal as well.

``logger`` is the package logger.  Header parsing, axis layout and codec
chunking are traced at DEBUG level, so ``logger.setLevel(logging.DEBUG)``
shows what the reader decided and why.
"""
import logging

error_level = 40
logger = logging.getLogger('nrrdio.global')
logger.addHandler(logging.StreamHandler())


class ErrorLevel:
    """Context manager to set the header check error level temporarily"""

    def __init__(self, level):
        self.level = level

    def __enter__(self):
        global error_level
        self._original_level = error_level
        error_level = self.level

    def __exit__(self, exc, value, tb):
        global error_level
        error_level = self._original_level
        return False


class LoggingOutputSuppressor:
    """Context manager detaching the package logger's handlers"""

    def __enter__(self):
        self.orig_handlers = logger.handlers[:]
        for handler in self.orig_handlers:
            logger.removeHandler(handler)

    def __exit__(self, exc, value, tb):
        for handler in self.orig_handlers:
            logger.addHandler(handler)
