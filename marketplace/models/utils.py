"""
Utility functions for models
"""

from pydantic import ConfigDict


def snake_to_camel(snake_str: str) -> str:
    """Convert snake_case to camelCase"""
    first, *rest = snake_str.split("_")
    return first + "".join(x.title() for x in rest)


def camel_case_config(**overrides) -> ConfigDict:
    """Model config for request bodies sent by the front end in camelCase"""
    return ConfigDict(
        alias_generator=snake_to_camel,
        populate_by_name=True,
        **overrides,
    )
