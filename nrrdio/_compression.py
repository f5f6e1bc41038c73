# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Compression of NRRD pixel payloads

The compression of a payload is given by the header ``encoding`` field, not by
the file name, so the payload stream is wrapped after the header (and any line
skip) has been read.
"""

from __future__ import annotations

import gzip
import typing as ty

from .errors import UnsupportedFeatureError

if ty.TYPE_CHECKING:
    ModeRB = ty.Literal['rb']
    ModeWB = ty.Literal['wb']
    Mode = ty.Union[ModeRB, ModeWB]


class DeterministicGzipFile(gzip.GzipFile):
    """Deterministic variant of GzipFile over an open binary stream

    This writer does not add filename information to the header, and defaults
    to a modification time (``mtime``) of 0 seconds.  Closing it leaves
    `fileobj` open.
    """

    def __init__(
        self,
        fileobj: ty.IO[bytes],
        mode: Mode = 'rb',
        compresslevel: int = 9,
        mtime: int = 0,
    ):
        super().__init__(
            filename='',
            mode=mode,
            compresslevel=compresslevel,
            fileobj=fileobj,
            mtime=mtime,
        )


def wrap_payload(
    fileobj: ty.IO[bytes],
    encoding: str,
    mode: Mode = 'rb',
    compresslevel: int = 1,
) -> ty.IO[bytes]:
    """Return stream reading or writing `encoding` payload through `fileobj`

    For ``raw`` encoding `fileobj` itself is returned.  For ``gzip`` a
    :class:`DeterministicGzipFile` around `fileobj` is returned; closing it
    finishes the compressed stream but leaves `fileobj` open.
    """
    if encoding == 'raw':
        return fileobj
    if encoding == 'gzip':
        return DeterministicGzipFile(fileobj, mode, compresslevel)
    raise UnsupportedFeatureError(f"'{encoding}' encoding is not supported.")
