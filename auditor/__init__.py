"""Site auditor: crawler and internal link-graph analysis."""

__version__ = "0.1.0"
