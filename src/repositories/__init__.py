"""Database access for players, matches, league blocks and ranking config."""
