"""Digest generation."""

from inboxsage.pipeline.generators.digest_generator import DigestGenerator, generate_digest_title

__all__ = ["DigestGenerator", "generate_digest_title"]
