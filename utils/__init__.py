"""Command-line helpers for inspecting Active Note output."""
