"""Data models for auto-fit requests and elements."""
