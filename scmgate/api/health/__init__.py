"""Health, readiness, and gateway statistics resources."""
