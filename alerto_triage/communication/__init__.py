"""Event delivery between report creation and the triage pipeline."""
