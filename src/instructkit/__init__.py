"""
InstructKit - persona instruction documents from reusable modules

InstructKit composes a persona's instruction document from independently
authored instruction modules, resolving conflicts between module sources
and recording a digest-bearing build report for every build.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
