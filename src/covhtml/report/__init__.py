"""Package merging, filtering, ordering and report assembly."""
