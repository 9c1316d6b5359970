from counting.nanocontracts.blueprint import Blueprint
from counting.nanocontracts.context import Context
from counting.nanocontracts.exception import NCFail
from counting.nanocontracts.runner import Runner
from counting.nanocontracts.types import migration, public, view

__all__ = [
    'Blueprint',
    'Context',
    'NCFail',
    'Runner',
    'migration',
    'public',
    'view',
]
