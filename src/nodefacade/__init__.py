"""nodefacade: cached path resolution, node metadata and queries over a content tree."""

__version__ = "1.0.1"
