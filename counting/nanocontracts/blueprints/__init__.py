from counting.nanocontracts.blueprints.counting import CountingContract

__all__ = ['CountingContract']
