"""Media pipeline: attachment fetch, artifact directory and sticker converters."""
