"""Pure domain types shared by every ordering module. Zero I/O."""
