"""Active triggers: directory change notification and periodic metadata refresh."""
