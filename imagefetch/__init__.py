"""Pull container images listed in a file with sealos and save them as tarballs, plus shell and file helpers."""

__version__ = "0.1.0"