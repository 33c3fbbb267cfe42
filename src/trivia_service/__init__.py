"""
Regional trivia service.

Turns a user keyword into one short Japanese trivia sentence about a fixed
region (北九州 by default):
- Length-checked generation (70-100 characters) with corrective re-prompts
- Escalation across an ordered list of Gemini model configurations
- Best-effort fallback answer when no model meets the length rule
- Per-client rate limiting and Redis-backed keyword analytics

Architecture: FastAPI orchestrator + Gemini REST client + Redis/Celery analytics
"""

__version__ = "0.1.0"
