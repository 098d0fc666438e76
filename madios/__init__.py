"""RDS graph structures for grammar induction: corpus paths, patterns, classes and array helpers."""

__version__ = "2.0.0"
__all__ = ["textutils", "structures", "graph", "matrix"]