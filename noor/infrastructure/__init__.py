"""Infrastructure adapters: storage, remote fetching and bundled data."""
