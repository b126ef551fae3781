"""
On-disk locations and the small single-file stores.

This package is responsible for:
* Determining the configuration root (via env var + platform default).
* Loading and persisting the application config record.
* Loading and persisting the ordered list of installed pack ids.
"""
