"""
# SNG compiler.

SNG is a textual representation of a PNG image: the file is a sequence of
chunk specifications, each one composed of the chunk type followed by its
content between braces

    IHDR {
        width 2 height 2
        bitdepth 8
        using color palette
    }
    PLTE {
        (255, 0, 0)   # red
        (0, 0, 255)   # blue
    }
    IMAGE {
        01
        10
    }

Two basic operations are performed on the source:

 1. the tokens of each chunk are parsed and accumulated into an
    ImageDescription, checking that the chunk is allowed at that point
    of the stream (IHDR must come first, PLTE before the image data and
    so on).

 2. once the image data is reached the description is packed into PNG
    chunks (length, type, data and CRC) and written out.

Data segments (IDAT and IMAGE) are not tokenized: they contain either two
hex digits per byte or, when a sample fits into 62 values, one character
per sample.
"""
