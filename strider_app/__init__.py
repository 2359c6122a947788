"""
Strider App - Loop Run Tracking Core

Records a physical loop run from a stream of location samples, validates
that the path returns to its starting point within tolerance, and prepares
a run record for submission to an external ledger.
"""

__version__ = "0.1.0"
__author__ = "Strider Team"
