from gallery.models.photo import Photo, PhotoStatus
from gallery.models.like import Like
from gallery.models.tag import Tag
from gallery.models.admin_session import AdminSession

__all__ = ["Photo", "PhotoStatus", "Like", "Tag", "AdminSession"]
