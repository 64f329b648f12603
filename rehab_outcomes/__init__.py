"""Clinical outcomes tracking engine.

Scores outcome-measure questionnaires, validates and interprets them, and
derives longitudinal progress and re-evaluation comparisons.
"""

__version__ = "0.1.0"
