"""Core data models for QCM Haptics."""
