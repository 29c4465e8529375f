"""Revisioned, patchable app-screen documents driven by LLM tool calls."""
