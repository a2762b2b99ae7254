"""Configuration and logging utilities for the Glide client."""
