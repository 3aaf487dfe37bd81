"""
deflation.cli — command-line entry points.

    deflation root addresses.txt
    deflation proof addresses.txt 0x...
    deflation verify --root 0x... --address 0x... --proof 0x... --proof 0x...
    deflation config
    deflation version
"""
