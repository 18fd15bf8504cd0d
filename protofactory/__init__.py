"""Protofactory - message id factory generator for protobuf schemas."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("protofactory")
except PackageNotFoundError:
    __version__ = "(local)"
