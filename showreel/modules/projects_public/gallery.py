"""
Video embeds and the image gallery lightbox for project detail pages.
"""

import re

DEFAULT_TITLE_COLOR = '#ff6b35'

YOUTUBE_RE = re.compile(r'(?:youtube\.com/(?:watch\?v=|embed/)|youtu\.be/)([a-zA-Z0-9_-]+)')
VIMEO_RE = re.compile(r'(?:vimeo\.com/(?:video/)?|player\.vimeo\.com/video/)(\d+)')


def video_embed_url(url):
    """Turn a YouTube or Vimeo page URL into its player URL.

    Anything else (including URLs that already embed) is returned unchanged.
    """
    if not url:
        return ''

    match = YOUTUBE_RE.search(url)
    if match:
        return f"https://www.youtube.com/embed/{match.group(1)}?rel=0&modestbranding=1"

    match = VIMEO_RE.search(url)
    if match:
        return f"https://player.vimeo.com/video/{match.group(1)}?title=0&byline=0&portrait=0"

    return url


def gallery_images(project):
    """The non-empty image1..image3 URLs, in order"""
    return [url for url in (project.get('image1'), project.get('image2'), project.get('image3')) if url]


def title_color(project):
    return project.get('color') or DEFAULT_TITLE_COLOR


class Lightbox:
    """Full-screen viewer over a gallery; next/prev wrap around."""

    def __init__(self, images):
        self.images = list(images)
        self.index = 0
        self.is_open = False

    def open(self, index):
        if not 0 <= index < len(self.images):
            raise IndexError(index)
        self.index = index
        self.is_open = True

    def close(self):
        self.is_open = False

    def next(self):
        self.index = (self.index + 1) % len(self.images)
        return self.current

    def prev(self):
        self.index = (self.index - 1 + len(self.images)) % len(self.images)
        return self.current

    def handle_key(self, key):
        """Escape closes, arrow keys navigate"""
        if key == 'Escape':
            self.close()
        elif key == 'ArrowRight':
            self.next()
        elif key == 'ArrowLeft':
            self.prev()

    @property
    def current(self):
        return self.images[self.index]

    @property
    def counter(self):
        return f"{self.index + 1} / {len(self.images)}"
