"""Holiday finder client.

Calls the holiday proxy, keeps the view as immutable snapshots and renders
them as text.
"""

__version__ = "1.0.0"
