"""API Resilience Implementations.

Contains the rate-limited scheduler and the retry policy used to stay
within the Management API rate limits.
Bounded Context: API Resilience
"""
