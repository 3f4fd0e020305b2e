"""Agents package: LLM-backed transaction extraction, intent routing and assistant runs."""
