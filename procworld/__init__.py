"""Seeded procedural terrain for voxel worlds, generated one chunk at a time."""

__version__ = '0.1.0'
