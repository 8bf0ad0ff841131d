"""
Core error taxonomy. API routers translate these to HTTP responses:

  ValidationError   → 400  (bad target URL / slug on creation)
  SlugConflict      → 400  (slug taken after retries)
  LinkNotFound      → 404  (unknown slug, nothing recorded)
  RecordingFailure  → never surfaced; logged and the redirect proceeds
"""


class ClicktrailError(Exception):
    pass


class ValidationError(ClicktrailError):
    pass


class SlugConflict(ClicktrailError):
    def __init__(self, slug: str):
        super().__init__(f"Slug already exists: {slug}")
        self.slug = slug


class LinkNotFound(ClicktrailError):
    def __init__(self, slug: str):
        super().__init__(f"No link for slug: {slug}")
        self.slug = slug


class RecordingFailure(ClicktrailError):
    pass
