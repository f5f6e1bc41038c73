# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Test nrrd-ls command"""

from logging.handlers import BufferingHandler

import pytest

import nrrdio.cmdline.utils
from nrrdio.cmdline.ls import MAX_UNIQUE, get_opt_parser, main, proc_file
from nrrdio.imageglobals import logger
from nrrdio.testing import data_path, header_text


@pytest.fixture
def quiet_globals(monkeypatch):
    # main changes the verbosity
    monkeypatch.setattr(nrrdio.cmdline.utils, 'verbose_level', 0)


def _opts(*args):
    opts, _ = get_opt_parser().parse_args(list(args))
    return opts


def test_proc_file_header():
    row = proc_file(str(data_path / 'small16.nhdr'), _opts())
    assert row[0].endswith('small16.nhdr')
    assert row[1:] == ['int16', '@l[  3,   2,   2]', '@lXYZ', '@l2.00x2.00x4.00',
                       'raw', 'detached', '@l-32768']


def test_proc_file_2d():
    row = proc_file(str(data_path / 'small.nrrd'), _opts('-H', 'scanner,missing'))
    assert row[1:] == ['uint8', '@l[  4,   3]', '@lXY', '@l0.50x0.25', 'raw', '', '',
                       'test', '!error']
    row = proc_file(str(data_path / 'small.nrrd'), _opts('-H', 'all'))
    assert row[-1] == 'test'


def test_proc_file_stats():
    row = proc_file(str(data_path / 'small_gz.nrrd'), _opts('-s', '-c'))
    assert row[5] == 'gzip'
    assert row[8:] == ['uint16', '@l[4]', '@l[1, 3e+02]', '@l1:1 2:1 3:1 300:1']
    row = proc_file(str(data_path / 'small.nrrd'), _opts('-s'))
    # zero sample left out
    assert row[-1] == '@l[1, 11]'
    assert row[-2] == '@l[11]'
    row = proc_file(str(data_path / 'small.nrrd'), _opts('-s', '-z'))
    assert row[-2:] == ['@l[12]', '@l[0, 11]']


def test_proc_file_signed_stats():
    row = proc_file(str(data_path / 'small16.nhdr'), _opts('-c', '-z'))
    assert row[-2] == 'uint16'
    assert row[-1] == '@l' + ' '.join(f'{i}:1' for i in range(-6, 6))


def test_proc_file_failed(tmp_path):
    bad = tmp_path / 'bad.nrrd'
    bad.write_bytes(b'NRRD0004\ntype: nonsense\n\n')
    assert proc_file(str(bad), _opts()) == [f'@l{bad}', 'failed']
    assert proc_file(str(tmp_path / 'missing.nrrd'), _opts('-s')) == [
        f'@l{tmp_path / "missing.nrrd"}', 'failed']


def test_main(capsys, quiet_globals):
    fnames = [str(data_path / name) for name in ('small.nrrd', 'small16.nhdr')]
    main(fnames)
    lines = [line for line in capsys.readouterr().out.splitlines() if line]
    assert len(lines) == 2
    assert lines[0].startswith(fnames[0])
    assert 'uint8' in lines[0]
    assert '0.50x0.25' in lines[0]
    assert 'detached' in lines[1]
    assert '-32768' in lines[1]


def test_max_unique(tmp_path, capsys, quiet_globals):
    import numpy as np

    from nrrdio import NrrdImage, save

    fname = str(tmp_path / 'many.nrrd')
    data = np.arange(1, MAX_UNIQUE + 2, dtype=np.float32).reshape(1, 1, 1, 7, 143)
    save(NrrdImage(data), fname)
    main(['-c', fname])
    assert f'!{MAX_UNIQUE + 1} uniques. Use --all-counts' in capsys.readouterr().out
    main(['-c', '--all-counts', fname])
    assert f"{MAX_UNIQUE + 1}:1" in capsys.readouterr().out


def test_fix_messages_suppressed(tmp_path, capsys, quiet_globals):
    fname = tmp_path / 'no_endian.nrrd'
    fname.write_bytes(header_text('type: short', 'dimension: 1', 'sizes: 2',
                                  'encoding: raw') + bytes(4))
    handler = BufferingHandler(10)
    logger.addHandler(handler)
    try:
        main([str(fname)])
        assert handler.buffer == []
        assert handler in logger.handlers
        main(['-vvv', str(fname)])
        assert any('endian' in record.getMessage() for record in handler.buffer)
    finally:
        logger.removeHandler(handler)
    assert 'int16' in capsys.readouterr().out
