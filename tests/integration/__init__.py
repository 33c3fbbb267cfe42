"""
Integration tests for the trivia service.

Test components against real external services:
- Keyword repository against a running Redis (skipped when unavailable)
"""
