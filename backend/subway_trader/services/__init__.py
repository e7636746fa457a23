"""Domain services: leaderboard windows, economy snapshots and auth.

Routes and socket handlers import from here, keeping transport concerns
separated from the game's rules.
"""
