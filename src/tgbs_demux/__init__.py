"""tgbs-demux: demultiplex tGBS reads by inline barcode and restriction-site marker."""

__version__ = "0.1.0"
