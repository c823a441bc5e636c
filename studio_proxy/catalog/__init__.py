"""Model catalog pipeline: classify, normalize, fetch, cache and refresh.

Public surface for the service layer; submodules stay importable directly.
"""

from .cache import CatalogCache
from .classifier import classify_provider, classify_speed, describe_model
from .fetcher import CatalogFetcher, build_entries, partition_models, unwrap_model_list
from .models import Catalog, ChatModelEntry, FetchResult, ImageModelEntry
from .normalizer import normalize_chat, normalize_image
from .scheduler import RefreshScheduler
from .variants import CatalogVariant, get_variant, variant_for_settings

__all__ = [
    "Catalog",
    "CatalogCache",
    "CatalogFetcher",
    "CatalogVariant",
    "ChatModelEntry",
    "FetchResult",
    "ImageModelEntry",
    "RefreshScheduler",
    "build_entries",
    "classify_provider",
    "classify_speed",
    "describe_model",
    "get_variant",
    "normalize_chat",
    "normalize_image",
    "partition_models",
    "unwrap_model_list",
    "variant_for_settings",
]
