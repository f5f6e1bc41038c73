# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Exceptions and warnings raised while reading and writing NRRD files

All exceptions derive from :class:`NrrdError`.  Errors found while reading a
header line carry the 1-based number of that line in ``line_num``, and show it
as a ``line <n>:`` prefix when printed.

>>> err = DuplicateFieldError("Duplicate 'sizes' field encountered.", 4)
>>> str(err)
"line 4: Duplicate 'sizes' field encountered."
"""


class NrrdError(Exception):
    """Base class for all NRRD errors"""

    def __init__(self, message='', line_num=None):
        super().__init__(message)
        self.message = message
        self.line_num = line_num

    def at_line(self, line_num):
        """Attach `line_num` if no line number is set yet; return self"""
        if self.line_num is None:
            self.line_num = line_num
        return self

    def __str__(self):
        if self.line_num is None:
            return self.message
        return f'line {self.line_num}: {self.message}'


class HeaderDataError(NrrdError):
    """Header contains invalid or inconsistent field values"""


class ImageDataError(NrrdError):
    """Pixel data cannot be represented as requested"""


class BadMagicError(HeaderDataError):
    """First line is not ``NRRD`` followed by four digits"""


class DuplicateFieldError(HeaderDataError):
    pass


class UnknownFieldError(HeaderDataError):
    pass


class MissingFieldError(HeaderDataError):
    pass


class FieldCountError(HeaderDataError):
    """Wrong number of values for a per-axis or per-space-dimension field"""


class KindSizeError(HeaderDataError):
    """Axis kind implies a size different from the axis size"""


class MalformedNumberError(HeaderDataError, ValueError):
    pass


class UnrecognizedValueError(HeaderDataError):
    """Value is not one of the names allowed for this field"""


class UnsupportedFeatureError(NrrdError):
    """Valid NRRD, but a feature this package does not implement"""


class UnsupportedSampleKindError(UnsupportedFeatureError, ImageDataError):
    """In-memory sample kind (e.g. packed RGB) cannot be encoded"""


class NrrdFileError(NrrdError, OSError):
    """Failure opening, skipping within or locating a file"""


class EndOfStreamError(NrrdFileError):
    """Stream ended before the start of the pixel payload was reached"""


class UnsupportedVersionWarning(UserWarning):
    """Header version is newer than the newest version we know"""


class TruncatedDataWarning(UserWarning):
    """Pixel payload ended early; the rest of the image is zero-filled"""
