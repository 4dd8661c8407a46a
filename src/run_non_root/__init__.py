"""Run commands as a non-root user, creating that user if necessary."""
