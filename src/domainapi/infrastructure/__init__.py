"""Infrastructure layer: Domain Store backends and runtime wiring."""
