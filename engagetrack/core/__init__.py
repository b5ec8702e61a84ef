"""Frame I/O and drawing helpers."""
