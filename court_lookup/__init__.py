"""Court case lookup engine.

Looks up a single case on a public court website and returns the case
metadata together with the downloadable orders and judgments.
"""

__version__ = "0.1.0"
