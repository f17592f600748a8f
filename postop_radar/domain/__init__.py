"""Domain models and static clinical content."""
