"""
Unit tests for the trivia service.

Test individual components in isolation:
- Data models (keyword validation, provider response parsing)
- Rate limiter (sliding window, sweep)
- Prompt builder and Gemini client (httpx.MockTransport)
- Retry engine (corrections, escalation, fallback)
- Keyword repository (mocked Redis), genre classifier
- API routes (FastAPI TestClient with dependency overrides)
"""
