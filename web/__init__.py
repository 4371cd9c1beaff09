"""
Web application package for the ChessMax engine.

Provides a stateless FastAPI JSON API that a board front end can call for
legal-move highlighting, game-state checks and bot moves.
"""
