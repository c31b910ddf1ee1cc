"""Hover dictionary: cached word definitions from remote dictionary APIs.

Usage Example:
    from hoverdict.registry import create_registry_from_config

    with create_registry_from_config() as registry:
        provider = registry.get_provider("free-dictionary")
        hint = provider.resolve("Running")
        if hint:
            print(hint.markup)
"""

__version__ = "0.3.0"
