"""Shared CLI, pipeline and YAML helpers used by the planner package."""
