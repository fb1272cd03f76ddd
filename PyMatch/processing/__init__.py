"""
Lazy sequence processing with sequential or parallel execution.
"""

from .execution import ParallelExecution, SequentialExecution
from .processable import Processable

__all__ = [
    "ParallelExecution",
    "Processable",
    "SequentialExecution",
]
