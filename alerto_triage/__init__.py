"""Alerto report triage pipeline.

Scores community-submitted weather and disaster reports, moves them through
the status lifecycle and notifies administrators about credible high-severity
reports.
"""

__version__ = "0.1.0"
