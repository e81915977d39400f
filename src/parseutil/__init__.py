"""
Parseutil, parser result post-processing

Builds walkable ast nodes from grammar semantic actions, runs a parser once
normalizing success and failure into one result shape, and renders parse
errors with an escaped excerpt of the offending source.
"""

__version__ = "0.1.0"


from ._error import *
from ._excerpt import *
from ._node import *
from ._factory import *
from ._parse import *
from ._lark import *
