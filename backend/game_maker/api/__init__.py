"""HTTP API for Game Maker"""
