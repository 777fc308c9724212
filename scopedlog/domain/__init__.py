"""Domain layer: data model, ports and errors with no framework imports."""
