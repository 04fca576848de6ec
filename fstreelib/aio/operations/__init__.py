"""Bulk operations built on the walker."""

from .lister import Lister
from .remover import RecursiveRemover, RemovalReport
from .creator import RecursiveCreator
from .copier import TreeCopier, CopyReport

__all__ = [
    'Lister',
    'RecursiveRemover',
    'RemovalReport',
    'RecursiveCreator',
    'TreeCopier',
    'CopyReport',
]
