#!python
# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""
Output a summary table for NRRD files (sample type, sizes, spacings, etc.)
"""

import sys
from optparse import Option, OptionParser

import numpy as np

import nrrdio
import nrrdio.cmdline.utils
from nrrdio.calibration import calibration_from_header
from nrrdio.cmdline.utils import _err, ap, safe_get, table2string, verbose
from nrrdio.errors import NrrdError
from nrrdio.imageglobals import LoggingOutputSuppressor

__license__ = 'MIT'


MAX_UNIQUE = 1000  # maximal number of unique values to report for --counts


def get_opt_parser():
    # use module docstring for help output
    p = OptionParser(
        usage=f'{sys.argv[0]} [OPTIONS] [FILE ...]\n\n' + __doc__,
        version='%prog ' + nrrdio.__version__,
    )

    p.add_options(
        [
            Option(
                '-v',
                '--verbose',
                action='count',
                dest='verbose',
                default=0,
                help='Make more noise.  Could be specified multiple times',
            ),
            Option(
                '-H',
                '--header-fields',
                dest='header_fields',
                default='',
                help='Custom header fields (comma separated) to be printed as well '
                '(if present)',
            ),
            Option(
                '-s',
                '--stats',
                action='store_true',
                dest='stats',
                default=False,
                help='Output basic data statistics',
            ),
            Option(
                '-c',
                '--counts',
                action='store_true',
                dest='counts',
                default=False,
                help='Output counts - number of entries for each sample value '
                '(useful for label maps)',
            ),
            Option(
                '--all-counts',
                action='store_true',
                dest='all_counts',
                default=False,
                help='Output all counts, even if number of unique values > %d' % MAX_UNIQUE,
            ),
            Option(
                '-z',
                '--zeros',
                action='store_true',
                dest='stats_zeros',
                default=False,
                help='Include zeros into output basic data statistics (--stats, --counts)',
            ),
        ]
    )

    return p


def _header_row(hdr):
    cal = calibration_from_header(hdr)
    sizes = [axis.size for axis in hdr.axes]
    zooms = [cal.pixel_width, cal.pixel_height]
    if hdr.z_axis > -1:
        zooms.append(cal.pixel_depth)
    row = [
        hdr.type,
        f"@l[{ap(sizes, '%3g')}]",
        '@l' + ''.join(axis.letter for axis in hdr.axes),
        f"@l{ap(zooms, '%.2f', 'x')}",
        hdr.encoding,
        'detached' if hdr.detached else '',
    ]
    if cal.value_offset:
        row += ['@l%+g' % cal.value_offset]
    else:
        row += ['']
    return row


def _stats_cells(img, opts):
    d = img.get_values()
    if not opts.stats_zeros:
        d = d[np.nonzero(d)]
    else:
        # functionality below doesn't depend on the original shape
        d = d.reshape(-1)
    cells = []
    if opts.stats:
        cells += ['@l[%d]' % np.prod(d.shape)]
        cells += [f'@l[{np.min(d):.2g}, {np.max(d):.2g}]' if len(d) else '-']
    if opts.counts:
        items, inv = np.unique(d, return_inverse=True)
        if len(items) > MAX_UNIQUE and not opts.all_counts:
            counts = _err('%d uniques. Use --all-counts' % len(items))
        else:
            freq = np.bincount(inv.ravel())
            counts = ' '.join('%g:%d' % (i, f) for i, f in zip(items, freq))
        cells += ['@l' + counts]
    return cells


def proc_file(f, opts):
    verbose(1, f'Loading {f}')

    row = [f'@l{f}']
    need_data = opts.stats or opts.counts
    try:
        if need_data:
            img = nrrdio.load(f)
            hdr = img.header
        else:
            hdr = nrrdio.load_header(f)
    except (NrrdError, OSError) as e:
        row += ['failed']
        verbose(2, f'Failed to gather information -- {e}')
        return row

    row += _header_row(hdr)

    if opts.header_fields:
        # signals "all fields"
        if opts.header_fields == 'all':
            header_fields = list(hdr.custom_fields)
        else:
            header_fields = opts.header_fields.split(',')

        for key in header_fields:
            if not key:  # skip empty
                continue
            try:
                row += [str(hdr.custom_fields[key])]
            except KeyError:
                row += [_err()]

    if need_data:
        row += [str(safe_get(img, 'data_dtype'))]
        row += _stats_cells(img, opts)
    return row


def main(args=None):
    """Show must go on"""

    parser = get_opt_parser()
    (opts, files) = parser.parse_args(args=args)

    nrrdio.cmdline.utils.verbose_level = opts.verbose

    if nrrdio.cmdline.utils.verbose_level < 3:
        # suppress header fix messages
        with LoggingOutputSuppressor():
            rows = [proc_file(f, opts) for f in files]
    else:
        rows = [proc_file(f, opts) for f in files]

    print(table2string(rows))
