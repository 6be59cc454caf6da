"""Route modules. The health router is built per app because its path is configurable."""
