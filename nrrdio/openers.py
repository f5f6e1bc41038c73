# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Context manager openers for file names and file objects"""

from __future__ import annotations

import io
import typing as ty

if ty.TYPE_CHECKING:
    from types import TracebackType


@ty.runtime_checkable
class Fileish(ty.Protocol):
    def read(self, size: int = -1, /) -> bytes: ...
    def write(self, b: bytes, /) -> int | None: ...


class Opener:
    r"""Class to accept, maybe open, and context-manage file-likes / filenames

    Provides context manager to close files that the constructor opened for
    you.  Files are always opened in binary mode; NRRD payload compression is
    applied separately (see :func:`nrrdio._compression.wrap_payload`).

    Parameters
    ----------
    fileish : str or file-like
        if str, then open with :func:`open`. If file-like, accept as is
    mode : str, optional
        mode for opening `fileish` when it is a str; default ``'rb'``
    """

    #: default compression level when writing gzip payloads
    default_compresslevel = 1

    fobj: ty.IO[bytes]

    def __init__(self, fileish: str | io.IOBase, mode: str = 'rb'):
        if isinstance(fileish, (io.IOBase, Fileish)):
            self.fobj = fileish
            self.me_opened = False
            self._name = getattr(fileish, 'name', None)
            return
        if 'b' not in mode:
            mode = f'{mode}b'
        self.fobj = open(fileish, mode)
        self._name = fileish
        self.me_opened = True

    @property
    def closed(self) -> bool:
        return self.fobj.closed

    @property
    def name(self) -> str | None:
        """Return ``self.fobj.name`` or self._name if not present

        self._name will be None if object was created with a fileobj, otherwise
        it will be the filename.
        """
        return self._name

    def read(self, size: int = -1, /) -> bytes:
        return self.fobj.read(size)

    def readline(self, size: int = -1, /) -> bytes:
        return self.fobj.readline(size)

    def write(self, b: bytes, /) -> int | None:
        return self.fobj.write(b)

    def seek(self, pos: int, whence: int = 0, /) -> int:
        return self.fobj.seek(pos, whence)

    def tell(self, /) -> int:
        return self.fobj.tell()

    def flush(self, /) -> None:
        self.fobj.flush()

    def close(self, /) -> None:
        return self.fobj.close()

    def close_if_mine(self) -> None:
        """Close ``self.fobj`` iff we opened it in the constructor"""
        if self.me_opened:
            self.close()

    def __enter__(self) -> Opener:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close_if_mine()
