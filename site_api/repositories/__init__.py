"""
Persistence adapters.

- blob_store: uploaded image files under the uploads root
- record_store: in-memory photos/events/content owned by one SiteStore
- json_storage: JSON snapshots of the SiteStore under the data root

Services depend on these classes instead of touching files directly.
"""
