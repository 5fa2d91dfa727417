"""Controllers binding editor events and commands to the popup."""
