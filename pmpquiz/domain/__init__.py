"""Domain models for questions and quiz sessions."""
