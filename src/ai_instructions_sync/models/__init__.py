"""Data models for instruction sync."""
