from functools import lru_cache

from supabase import Client, create_client

from .config import Settings, get_settings


def create_supabase(settings: Settings) -> Client:
    url = str(settings.supabase_url)
    key = settings.supabase_key

    if "your-project.supabase.co" in url:
        raise RuntimeError(
            "SUPABASE_URL is still the placeholder (your-project). "
            "Fill in your real project URL and service key."
        )
    return create_client(url, key)


@lru_cache()
def get_supabase() -> Client:
    return create_supabase(get_settings())
