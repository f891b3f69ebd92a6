"""API package for the Feedback Intelligence Engine."""
