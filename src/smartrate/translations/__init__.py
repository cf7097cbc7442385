"""Message catalogues shipped with the fiscal engine."""
