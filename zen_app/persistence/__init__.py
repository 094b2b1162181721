"""
Persistence for the production log: output records and CSV export.
"""
