import re


def to_collection_name(cls_name: str) -> str:
    """ Derives a collection name from a class name: Person -> person, BlogPost -> blog_post, HTTPLog -> http_log. """
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', cls_name)
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    return name.lower()
