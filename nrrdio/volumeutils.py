# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Code tables and byte stream utilities shared by the NRRD modules"""

import numpy as np

from .errors import EndOfStreamError
from .imageglobals import logger

_endian_codes = (  # numpy code, NRRD name, aliases
    ('<', 'little', 'l', 'le', 'L', 'LE'),
    ('>', 'big', 'BIG', 'b', 'be', 'B', 'BE'),
)


class Recoder:
    """class to return canonical code(s) from code or aliases

    The concept is a lot easier to read in the implementation and
    tests than it is to explain, so...

    >>> # If you have some codes, and several aliases, like this:
    >>> codes = (('raw',), ('gzip', 'gz'))
    >>> recodes = Recoder(codes)
    >>> recodes.code['gz']
    'gzip'
    >>> recodes.code['raw']
    'raw'
    >>> # Or maybe you have a code, a label and some aliases
    >>> codes = ((1, 'node', 'NODE'), (2, 'cell', 'CELL'))
    >>> recodes = Recoder(codes, fields=('code', 'label'))
    >>> recodes.code['CELL']
    2
    >>> recodes.label[1]
    'node'
    >>> # For convenience, you can get the first entered name by
    >>> # indexing the object directly
    >>> recodes['node']
    1
    """

    def __init__(self, codes, fields=('code',)):
        """Create recoder object

        Parameters
        ----------
        codes : sequence of sequences
            Each sequence defines values (codes) that are equivalent
        fields : {('code',) string sequence}, optional
            names by which elements in sequences can be accessed
        """
        self.fields = tuple(fields)
        self.field1 = {}  # a placeholder for the check below
        for name in fields:
            if name in self.__dict__:
                raise KeyError(f'Input name {name} already in object dict')
            self.__dict__[name] = {}
        self.field1 = self.__dict__[fields[0]]
        self.add_codes(codes)

    def add_codes(self, code_syn_seqs):
        """Add codes to object

        Parameters
        ----------
        code_syn_seqs : sequence
            sequence of sequences, where each sequence ``S = code_syn_seqs[n]``
            for n in 0..len(code_syn_seqs), is a sequence giving values in the
            same order as ``self.fields``.  Each S should be at least of the
            same length as ``self.fields``.  After this call, if ``self.fields
            == ['field1', 'field2'], then ``self.field1[S[n]] == S[0]`` for all
            n in 0..len(S) and ``self.field2[S[n]] == S[1]`` for all n in
            0..len(S).
        """
        for code_syns in code_syn_seqs:
            for alias in code_syns:
                for field_ind, field_name in enumerate(self.fields):
                    self.__dict__[field_name][alias] = code_syns[field_ind]

    def __getitem__(self, key):
        """Return value from field1 dictionary (first column of values)"""
        return self.field1[key]

    def __contains__(self, key):
        """True if field1 in recoder contains `key`"""
        try:
            self.field1[key]
        except KeyError:
            return False
        return True


endian_codes = Recoder(_endian_codes)


def make_dt_codes(codes_seqs):
    """Create sample type Recoder from ``(name, numpy type, *aliases)`` rows

    Parameters
    ----------
    codes_seqs : sequence of sequences
       each row gives the canonical NRRD type name, the numpy type used on
       disk (such as ``np.float32``) and any number of alias names.

    Returns
    -------
    rec : ``Recoder`` instance
       Recoder that returns the canonical name (``code``) or the numpy dtype
       (``dtype``) when indexed with any alias.

    Examples
    --------
    >>> rec = make_dt_codes((('uint16', np.uint16, 'ushort'),))
    >>> rec.code['ushort']
    'uint16'
    >>> rec.dtype['uint16'].itemsize
    2
    """
    dt_codes = []
    for seq in codes_seqs:
        if len(seq) < 2:
            raise ValueError('Sequences must give at least name and type')
        name, np_type = seq[:2]
        dt_codes.append((name, np.dtype(np_type)) + tuple(seq[2:]))
    return Recoder(dt_codes, ('code', 'dtype'))


def pretty_mapping(mapping):
    """Make pretty string from mapping

    Adjusts text column to print values on basis of longest key.

    Parameters
    ----------
    mapping : mapping
       implementing iterator returning keys and ``__getitem__``

    Returns
    -------
    str : string

    Examples
    --------
    >>> d = {'type': 'uint8', 'dimension': 2}
    >>> print(pretty_mapping(d))
    type       : uint8
    dimension  : 2
    """
    lens = [len(str(name)) for name in mapping]
    mxlen = max(lens) if lens else 0
    fmt = '%%-%ds  : %%s' % mxlen
    out = []
    for name in mapping:
        value = mapping[name]
        out.append(fmt % (name, value))
    return '\n'.join(out)


def skip_lines(fileobj, count):
    """Read past `count` lines of `fileobj`

    A line is zero or more bytes ended by ``\\n``, ``\\r`` or ``\\r\\n``.
    A lone ``\\r`` followed by other data needs one byte of look-ahead, which
    is given back by seeking, so `fileobj` must be seekable in that case.

    Raises
    ------
    EndOfStreamError
        if the stream ends before `count` line ends were seen
    """
    remaining = count
    while remaining > 0:
        byte = fileobj.read(1)
        if not byte:
            raise EndOfStreamError(f'EOF - failed to seek to skip {count} lines within the file.')
        if byte == b'\n':
            remaining -= 1
        elif byte == b'\r':
            remaining -= 1
            following = fileobj.read(1)
            if following and following != b'\n':
                fileobj.seek(-1, 1)


def skip_bytes(fileobj, count, block_size=65536):
    """Read and discard `count` bytes of `fileobj`

    Works for streams that cannot seek, such as decompressing readers.

    Raises
    ------
    EndOfStreamError
        if the stream ends before `count` bytes were read
    """
    if count > 0:
        logger.debug('Skipping %d bytes.', count)
    remaining = count
    while remaining > 0:
        chunk = fileobj.read(min(block_size, remaining))
        if not chunk:
            raise EndOfStreamError(f'EOF - failed to seek to byte {count} within the file.')
        remaining -= len(chunk)

