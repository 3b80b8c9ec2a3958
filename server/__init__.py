"""Local HTTP API for Tic Tac Chess."""
