"""Link extraction from fetched HTML."""

from w3c_validate.extraction.links import extract_links

__all__ = ["extract_links"]
