"""Theme migration and rollback for Tailwind/React codebases."""

__version__ = "0.4.0"
