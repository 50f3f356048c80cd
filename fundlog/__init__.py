"""Personal fund portfolio tracker.

Keeps a list of holdings, a funds record (cash + receivables) and a
chronological series of valuation snapshots that stays consistent under
retroactive edits: backdated purchases, historical price corrections and
deletions.
"""

__version__ = "0.1.0"
