"""Configuration package: settings, logging and scoring rule constants."""
