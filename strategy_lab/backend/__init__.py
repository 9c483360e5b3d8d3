"""Strategy Lab backend package."""
