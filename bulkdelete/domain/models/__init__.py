"""Domain models: jobs, outcomes, run configuration and the error taxonomy."""
