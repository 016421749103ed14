"""Configuration and error types shared by the pipeline."""
