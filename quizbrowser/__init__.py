"""Playwright bindings for the quiz detection engine (live page, bridge, relay, CLIs)."""
