"""Backend helpers shared by the Pelican client."""
