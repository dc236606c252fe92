"""Incremental repository index for onboarding to unfamiliar codebases."""

__version__ = "0.1.0"
