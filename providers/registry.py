from typing import Dict, Optional, Type

from providers.base import DEFAULT_DESCRIPTION_MAX, Provider
from providers.jsonfeed_pub import JsonFeedProvider, KonkleProvider
from providers.rss_pub import FacebookProvider, RssProvider
from subfeed.errors import UnknownProviderError

PROVIDER_CLASSES: Dict[str, Type[Provider]] = {
    "facebook": FacebookProvider,
    "konkle": KonkleProvider,
    "rss": RssProvider,
    "jsonfeed": JsonFeedProvider,
}


def build_providers(description_max: int = DEFAULT_DESCRIPTION_MAX) -> Dict[str, Provider]:
    return {kind: cls(description_max=description_max) for kind, cls in PROVIDER_CLASSES.items()}


_DEFAULT_PROVIDERS = build_providers()


def get_provider(post_type: str, providers: Optional[Dict[str, Provider]] = None) -> Provider:
    table = _DEFAULT_PROVIDERS if providers is None else providers
    try:
        return table[(post_type or "").lower()]
    except KeyError:
        raise UnknownProviderError(post_type) from None
