"""Helper functions for tests
"""
from io import BytesIO

from ..headerparser import parse_header
from ..headerwriter import write_header
from ..pixelcodec import decode_image, encode_image


def header_text(*lines, version=5):
    """Bytes of header with magic line, field `lines` and ending blank line"""
    return '\n'.join((f'NRRD{version:04d}',) + lines + ('', '')).encode('latin-1')


def bytesio_round_trip(hdr, data):
    """Write header and data to bytesio, then read both back"""
    bio = BytesIO()
    bio.write(write_header(hdr))
    encode_image(hdr, data, bio)
    bio.seek(0)
    hdr_back = parse_header(bio)
    return hdr_back, decode_image(hdr_back, bio)
