"""Domain layer for Grantflow.

Pure business rules: budget pools, proposal lifecycle, ballots and
aggregation. Nothing in this package performs I/O.
"""
