"""
HTTP API for the FUT Manager game.
"""
