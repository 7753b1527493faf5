"""Application constants."""


# Rendering constants
class Render:
    """Renderer defaults."""

    DEFAULT_DURATION = 3600  # 1 hour
    SHORT_DURATION = 60
    FADE_IN_SECONDS = 5
    FADE_OUT_SECONDS = 5

    VIDEO_WIDTH = 1920
    VIDEO_HEIGHT = 1080
    VIDEO_PREFIX = "lofi-nature"
    VIDEO_EXTENSION = ".mp4"

    # Thumbnails ignore the requested video length
    THUMBNAIL_WIDTH = 1280
    THUMBNAIL_HEIGHT = 720
    THUMBNAIL_DURATION = 5
    THUMBNAIL_FADE_SECONDS = 2
    THUMBNAIL_PREFIX = "thumbnail_"
    THUMBNAIL_EXTENSION = ".jpg"

    FONT_FILE = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
    TITLE_FONT_SIZE = 64
    SUBTITLE_FONT_SIZE = 36


class Colors:
    """Default colors for the ambient background and overlays."""

    BACKGROUND = "#0a1628"
    TEXT = "white"
    ACCENT = "#40E0D0"


# File extensions served by the status view
class Extensions:
    """Artifact extensions by kind."""

    VIDEO = (".mp4",)
    MUSIC = (".mp3", ".wav")
    THUMBNAIL = (".jpg", ".jpeg", ".png")


# YouTube upload constants
class YouTube:
    """YouTube Data API configuration."""

    UPLOAD_SCOPE = "https://www.googleapis.com/auth/youtube.upload"
    AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URI = "https://oauth2.googleapis.com/token"
    WATCH_HOST = "www.youtube.com"
    CATEGORY_MUSIC = "10"
    CATEGORY_PEOPLE_BLOGS = "22"
    MAX_TITLE_LENGTH = 100
    UPLOAD_CHUNK_SIZE = 8 * 1024 * 1024
    VIDEO_MIMETYPE = "video/mp4"
