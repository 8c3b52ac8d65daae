from .supabase_storage import (
    MediaStore,
    PreparedImage,
    SupabaseMediaStore,
    prepare_image,
    public_id_from_url,
)

__all__ = [
    "MediaStore",
    "PreparedImage",
    "SupabaseMediaStore",
    "prepare_image",
    "public_id_from_url",
]
