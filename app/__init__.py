"""Paper trading application: configuration, services and reporting."""
