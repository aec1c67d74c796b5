"""Kernel-level services shared by modules."""
