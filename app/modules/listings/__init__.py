"""Car listings read path."""
