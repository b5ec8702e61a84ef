"""Live and headless runners."""
