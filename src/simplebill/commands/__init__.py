"""Sub-commands exposed through :mod:`simplebill.cli`."""
