"""Host data collectors (PowerShell, registry)."""
