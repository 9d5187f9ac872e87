"""
SpendPilot API

FastAPI service exposing the policy engine.
"""
