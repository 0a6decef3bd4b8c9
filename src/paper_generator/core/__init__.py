"""Core data models for the question paper generator."""
