# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Test for volumeutils module"""

from io import BytesIO

import numpy as np
import pytest

from ..errors import EndOfStreamError
from ..nrrdheader import data_type_codes
from ..volumeutils import (Recoder, endian_codes, make_dt_codes, pretty_mapping, skip_bytes,
                           skip_lines)


def test_recoder():
    codes = ((1, 'node', 'NODE'), (2, 'cell'))
    rc = Recoder(codes, fields=('code', 'label'))
    assert rc.code['NODE'] == 1
    assert rc.label[2] == 'cell'
    assert rc['cell'] == 2
    assert 'node' in rc
    assert 'corner' not in rc
    with pytest.raises(KeyError):
        rc.code['corner']
    # field names cannot shadow attributes
    with pytest.raises(KeyError):
        Recoder(codes, fields=('fields',))


def test_endian_codes():
    assert endian_codes.code['little'] == '<'
    assert endian_codes.code['big'] == '>'
    assert endian_codes.code['BE'] == '>'
    assert 'native' not in endian_codes


def test_make_dt_codes():
    rec = make_dt_codes((('int16', np.int16, 'short'), ('float', np.float32)))
    assert rec.code['short'] == 'int16'
    assert rec.dtype['short'] == np.dtype(np.int16)
    assert rec.dtype['float'] == np.dtype(np.float32)
    assert rec.fields == ('code', 'dtype')
    with pytest.raises(ValueError):
        make_dt_codes((('uint8',),))


def test_data_type_codes():
    assert data_type_codes.code['unsigned short int'] == 'uint16'
    assert data_type_codes.dtype['uchar'] == np.dtype(np.uint8)
    assert data_type_codes.dtype['double'].itemsize == 8
    assert 'int64' not in data_type_codes


def test_pretty_mapping():
    assert pretty_mapping({}) == ''
    text = pretty_mapping({'type': 'uint8', 'dimension': 3})
    assert text == 'type       : uint8\ndimension  : 3'
    text = pretty_mapping({'a': 1})
    assert text == 'a  : 1'


@pytest.mark.parametrize('line_end', [b'\n', b'\r', b'\r\n'])
def test_skip_lines(line_end):
    bio = BytesIO(line_end.join([b'one', b'two', b'three']))
    skip_lines(bio, 2)
    assert bio.read() == b'three'
    bio.seek(0)
    skip_lines(bio, 0)
    assert bio.tell() == 0
    with pytest.raises(EndOfStreamError):
        skip_lines(bio, 3)


def test_skip_lines_empty_lines():
    bio = BytesIO(b'\n\r\n\rdata')
    skip_lines(bio, 3)
    assert bio.read() == b'data'


def test_skip_bytes():
    bio = BytesIO(bytes(range(100)))
    skip_bytes(bio, 10, block_size=3)
    assert bio.read(1) == b'\x0a'
    skip_bytes(bio, 0)
    assert bio.tell() == 11
    with pytest.raises(EndOfStreamError):
        skip_bytes(bio, 90)
