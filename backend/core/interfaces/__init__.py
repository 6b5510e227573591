# Interfaces (Abstract Contracts)
# Infrastructure implements these
from .repositories import ContentStore, Filter, FilterOp

__all__ = [
    "ContentStore",
    "Filter",
    "FilterOp",
]
