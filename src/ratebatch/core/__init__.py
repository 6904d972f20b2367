"""
Core RateBatch Infrastructure

Exception hierarchy, configuration models and the rate-limited
processing engine.
"""
