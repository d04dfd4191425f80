"""Domain models, presets and errors. No HTTP, CLI or provider SDK imports."""
