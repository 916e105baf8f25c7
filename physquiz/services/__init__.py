"""Core services: physics, accounts, sessions, leaderboard, questions, rounds.

Routes, socket handlers and CLI commands import from here, keeping transport
concerns separated from the rules of a round.
"""
