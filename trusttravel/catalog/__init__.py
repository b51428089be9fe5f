"""
Place catalog.

Responsibilities:
- Load the canonical place dataset into memory.
- Serve candidate slices filtered by destination area and category.
- Merge review aggregates (rating, count, tags) into each place.
- Cache candidate slices and invalidate them on writes.
"""
