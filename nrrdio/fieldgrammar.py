# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Lexical grammar of NRRD header lines

A header field line is either ``key: value`` (a standard field) or
``key:=value`` (a custom key/value pair).  A value is split into
whitespace-separated *subfields*, where a double-quoted span is a single
subfield, or into parenthesized *vectors* of comma-separated numbers.

>>> split_line('sizes: 3 512 512')
('sizes', '3 512 512', False)
>>> split_line('my key:=some: value')
('my key', 'some: value', True)
>>> split_subfields('"x pos" none "time"')
['x pos', None, 'time']
>>> origin, direction = split_vectors('(1,0,2.5) none')
>>> origin.tolist(), direction
([1.0, 0.0, 2.5], None)
>>> format_real(2.0), format_real(float('-inf'))
('2', '-inf')

See http://teem.sourceforge.net/nrrd/format.html for the format description.
"""
import math
import re

import numpy as np

from .errors import MalformedNumberError

CUSTOM_DELIMITER = ':='
STANDARD_DELIMITER = ': '

#: values that stand for "no value" in a subfield, compared ignoring case
NONE_VALUES = ('', 'none', '???')

_SUBFIELD_RE = re.compile(r'(".*?"|\S+)(\s+|$)')
_VECTOR_RE = re.compile(r'(none|\(.+?\))(\s+|$)', re.IGNORECASE)
_VECTOR_SPLIT_RE = re.compile(r'\s*,\s*')


def split_line(line):
    """Split header `line` into key, raw value and custom flag

    The custom delimiter ``:=`` is looked for first, because ``: `` may
    legitimately appear inside a custom value.  The key is stripped of
    surrounding whitespace; the value is returned untouched.

    Parameters
    ----------
    line : str
        header line without its line ending

    Returns
    -------
    key : str
        field name, or empty string if `line` has no delimiter
    value : str
        text after the delimiter
    is_custom : bool
        True if the line used ``:=``
    """
    i = line.find(CUSTOM_DELIMITER)
    is_custom = i >= 0
    if not is_custom:
        i = line.find(STANDARD_DELIMITER)
    if i < 0:
        return '', '', False
    return line[:i].strip(), line[i + 2:], is_custom


def is_none(value):
    """True if `value` is ``None`` or one of the "no value" spellings"""
    return value is None or value.lower() in NONE_VALUES


def split_subfields(value):
    """Split `value` on whitespace, keeping double-quoted spans together

    Quotes are removed from quoted subfields.  Subfields spelled as in
    :data:`NONE_VALUES` become ``None``.

    >>> split_subfields('domain "rgb color"  ???')
    ['domain', 'rgb color', None]
    """
    subfields = []
    for match in _SUBFIELD_RE.finditer(value):
        subfield = match.group(1)
        if is_none(subfield):
            subfields.append(None)
        elif subfield.startswith('"'):
            subfields.append(subfield[1:-1])
        else:
            subfields.append(subfield)
    return subfields


def split_vectors(value):
    """Parse `value` as a whitespace-separated list of vectors

    Each vector is ``(v1,v2,...)`` and becomes a float64 array; ``none``
    becomes ``None``.

    Raises
    ------
    MalformedNumberError
        if a vector element is not a number
    """
    vectors = []
    for match in _VECTOR_RE.finditer(value):
        text = match.group(1)
        if is_none(text):
            vectors.append(None)
            continue
        numbers = _VECTOR_SPLIT_RE.split(text[1:-1].strip())
        vectors.append(np.array([parse_real(n) for n in numbers], dtype=np.float64))
    return vectors


def parse_real(token):
    """Parse `token` as a float, with NRRD spellings of NaN and infinity

    >>> parse_real('NaN'), parse_real('+inf'), parse_real('-1.5e2')
    (nan, inf, -150.0)
    """
    lowered = token.strip().lower()
    if lowered == 'nan':
        return math.nan
    if lowered in ('inf', '+inf'):
        return math.inf
    if lowered == '-inf':
        return -math.inf
    try:
        return float(lowered)
    except ValueError:
        raise MalformedNumberError(f"Invalid number, '{token}'.")


def parse_int(token):
    """Parse `token` as a decimal integer"""
    try:
        return int(token.strip())
    except ValueError:
        raise MalformedNumberError(f"Invalid integer, '{token}'.")


def format_real(x):
    """Format `x` so that :func:`parse_real` reads back the same value

    NaN is ``nan``, infinities are ``inf`` / ``-inf``, and a trailing
    ``.0`` is dropped from integral values.
    """
    if math.isnan(x):
        return 'nan'
    if math.isinf(x):
        return 'inf' if x > 0 else '-inf'
    text = repr(float(x))
    if text.endswith('.0'):
        return text[:-2]
    return text


def clean_string(value):
    """Make `value` safe for a single header line; None becomes ``''``"""
    if value is None:
        return ''
    return value.replace('\n', ' ')


def format_string_subfield(value):
    """Double-quote `value` for a subfield, or ``none`` when `value` is None

    Newlines and double quotes cannot be escaped in a subfield, so they are
    replaced with a space and a single quote.

    >>> format_string_subfield('say "hi"')
    '"say \\'hi\\'"'
    """
    if value is None:
        return 'none'
    value = value.replace('\n', ' ').replace('"', "'")
    return f'"{value}"'


def format_vector(vec):
    """Format `vec` as ``(a,b,c)``; ``none`` if None or all NaN"""
    if vec is None or not any_number(vec):
        return 'none'
    return '(' + ','.join(format_real(x) for x in vec) + ')'


def any_number(values):
    """True if any element of `values` is not NaN"""
    return values is not None and any(not math.isnan(x) for x in values)


def any_value(values):
    """True if any element of `values` is set

    Elements are set when not None and, for vectors, when not all NaN.
    """
    if values is None:
        return False
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) or any_number(value):
            return True
    return False
