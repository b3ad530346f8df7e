"""API routers for the holiday proxy."""
