"""CSR graphs with sorted-set operations, query patterns, label statistics, k-cores and edge scheduling."""

__version__ = "0.1.0"