"""Search Flickr photos and fetch their thumbnails."""
