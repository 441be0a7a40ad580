"""Flickr REST API access: response schema, client and async searcher."""
