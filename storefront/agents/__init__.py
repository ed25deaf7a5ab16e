"""
LLM-facing components (prompt templates) for the Storefront backend.
"""
