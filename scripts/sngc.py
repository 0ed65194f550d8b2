#!/usr/bin/env python3
'''
Compile SNG text into PNG images

 $ sngc.py image.sng && display image.png
'''
import sys

from sng.cli import main


if __name__ == '__main__':
    sys.exit(main())
