'''
Command line interface: with no arguments the source is read from stdin
and the PNG written to stdout, otherwise each file.sng is compiled into
file.png beside it.
'''
import logging
import os
import sys
from pathlib import Path

from .compiler import sngc, EXIT_SUCCESS, EXIT_FAILURE, EXIT_BACKEND


logger = logging.getLogger(__name__)


def usage(progname):
    print(f'''usage: {progname} [file.sng ...]

Compile SNG sources into PNG images. Without arguments read from stdin and
write to stdout. Set the environment variable DEBUG to see what happens.''')


def output_path(path):
    return str(Path(path).with_suffix('.png'))


def compile_file(path, err=None):
    err = err if err is not None else sys.stderr
    path_png = output_path(path)

    try:
        fin = open(path, 'rb')
    except OSError as e:
        err.write(f'{path}: can\'t open: {e.strerror}\n')
        return EXIT_FAILURE

    try:
        fout = open(path_png, 'wb')
    except OSError as e:
        fin.close()
        err.write(f'{path_png}: can\'t create: {e.strerror}\n')
        return EXIT_BACKEND

    logger.debug('compiling \'%s\' into \'%s\'', path, path_png)
    with fin, fout:
        status = sngc(fin, path, fout, err=err)

    # a partially written image is useless
    if status != EXIT_SUCCESS:
        os.remove(path_png)

    return status


def main(argv=None):
    argv = sys.argv if argv is None else argv

    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)

    if '-h' in argv[1:] or '--help' in argv[1:]:
        usage(os.path.basename(argv[0]))
        return EXIT_SUCCESS

    if len(argv) < 2:
        return sngc(sys.stdin.buffer, 'stdin', sys.stdout.buffer)

    return max([compile_file(_) for _ in argv[1:]])
