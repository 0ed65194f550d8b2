#!/usr/bin/env python3
'''
Compile a SNG file and show the resulting image

 $ sngdisplay.py image.sng
'''
import io
import logging
import sys
import os

from PIL import Image

from sng.compiler import compile_bytes, format_diagnostic
from sng.exceptions import SNGException


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(level=logging.INFO if 'DEBUG' not in os.environ else logging.DEBUG)


def usage(progname):
    print(f'usage: {progname} <sng file path>')
    sys.exit(1)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    filepath = sys.argv[1]

    with open(filepath, 'rb') as f:
        source = f.read()

    try:
        description, data = compile_bytes(source, source=filepath)
    except SNGException as e:
        print(format_diagnostic(filepath, e), file=sys.stderr)
        sys.exit(1)

    logger.info('%r', description)

    image = Image.open(io.BytesIO(data))
    image.show()
