"""Content pipeline: collection, summarization, digests and scheduling."""
