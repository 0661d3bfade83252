"""Domain records (photos, events) and their serialized form."""
