# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Test nrrd-dx command"""

import pytest

import nrrdio
from nrrdio.cmdline.nrrd_dx import main
from nrrdio.testing import data_path, header_text


def test_clean_files(capsys):
    fnames = [str(data_path / name) for name in
              ('small.nrrd', 'small16.nhdr', 'small_gz.nrrd', 'small_skip.nhdr')]
    assert main(fnames) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [f'Header for "{fname}" is clean' for fname in fnames]


def test_picky_header(tmp_path, capsys):
    fname = tmp_path / 'picky.nrrd'
    fname.write_bytes(header_text('type: short', 'dimension: 2', 'sizes: 2 2'))
    assert main([str(fname)]) == 1
    out = capsys.readouterr().out
    assert out == (f'Picky header check output for "{fname}"\n\n'
                   "'encoding' field must be specified.\n"
                   "'endian' field missing for 'int16' samples\n\n")


def test_unreadable(tmp_path, capsys):
    missing = str(tmp_path / 'missing.nrrd')
    bad = tmp_path / 'bad.nrrd'
    bad.write_bytes(b'not a nrrd file\n')
    good = str(data_path / 'small.nrrd')
    assert main([missing, str(bad), good]) == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(f'Cannot read header of "{missing}"')
    assert lines[1].startswith(f'Cannot read header of "{bad}"')
    assert lines[2] == f'Header for "{good}" is clean'


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(['--version'])
    assert nrrdio.__version__ in capsys.readouterr().out
