"""Protofactory message factory generator."""

from .collector import CollectError as CollectError
from .collector import collect as collect
from .collector import find_proto_files as find_proto_files
from .collector import proto_list as proto_list
from .emitter import emit as emit
from .scanner import ScanError as ScanError
from .scanner import parse as parse
from .scanner import scan as scan
from .types import *
