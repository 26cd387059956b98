"""Domain layer - models and ports, free of infrastructure imports."""
