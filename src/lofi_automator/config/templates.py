"""Publish metadata templates for uploaded videos."""

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Literal

import structlog

from lofi_automator.constants import YouTube
from lofi_automator.errors import ConfigurationError

logger = structlog.get_logger()

DurationClass = Literal["standard", "short"]
PrivacyStatus = Literal["public", "unlisted", "private"]

DEFAULT_TEMPLATE_KEY = "christian_lofi"


@dataclass(frozen=True)
class Template:
    """Named bundle of publish metadata."""

    key: str
    title: str
    description: str
    tags: tuple[str, ...]
    category_id: str = YouTube.CATEGORY_MUSIC
    privacy_status: PrivacyStatus = "public"
    playlist: str | None = None
    duration_class: DurationClass = "standard"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "categoryId": self.category_id,
            "privacyStatus": self.privacy_status,
            "durationClass": self.duration_class,
        }
        if self.playlist:
            data["playlist"] = self.playlist
        return data

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "Template":
        """Create a Template from a catalog entry."""
        return cls(
            key=key,
            title=data["title"],
            description=data["description"],
            tags=tuple(data.get("tags", ())),
            category_id=str(data.get("categoryId", YouTube.CATEGORY_MUSIC)),
            privacy_status=data.get("privacyStatus", "public"),
            playlist=data.get("playlist"),
            duration_class=data.get("durationClass", "standard"),
        )


# Built-in catalog
TEMPLATES: dict[str, dict] = {
    "christian_lofi": {
        "title": "🌙 Peaceful Worship Lofi - 1 Hour | Christian Meditation Music",
        "description": """🙏 Welcome to peaceful Christian lofi worship music.

Perfect for:
• Prayer and meditation
• Quiet time with God
• Studying and reflection
• Sleeping and rest

🎵 Soothing lofi beats with faith-filled lyrics
✨ Find peace in His presence today

📖 "Be still, and know that I am God" - Psalm 46:10

#christianlofi #worshipmusic #peacefulmusic #christianmusic #faith #meditation""",
        "tags": [
            "christian lofi", "worship music", "peaceful music", "christian meditation",
            "faith music", "prayer music", "christian ambient", "sleep worship",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Christian Lofi Worship",
    },
    "lofi_nature": {
        "title": "🌿 Lofi Nature Vibes - 1 Hour | Cozy Study & Relaxation",
        "description": """🌿 Welcome to peaceful lofi nature vibes!

Perfect for:
• Studying and focus
• Working from home
• Meditation and yoga
• Sleeping and relaxation

🎶 Calming lofi beats with stunning nature visuals
✨ Sit back, breathe, and enjoy

#lofi #studymusic #nature #relaxation #chill #focusmusic #ambient #sleepmusic""",
        "tags": [
            "lofi", "study music", "nature", "relaxing", "chill", "focus music",
            "ambient", "sleep music", "meditation",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
    },
    "nature_ambient": {
        "title": "🌊 Peaceful Ocean Waves - 2 Hours | Nature Sounds for Sleep & Relaxation",
        "description": """🌊 Pure ocean waves for deep relaxation.

Features:
• Crystal clear ocean sounds
• No music - pure nature
• Perfect for sleeping
• Stress relief and meditation

🎧 Put on your headphones, close your eyes,
and let the waves wash your worries away

#oceansounds #naturesounds #sleepmusic #relaxation #meditation #whitenoise #stressrelief""",
        "tags": [
            "ocean sounds", "nature sounds", "sleep music", "relaxation", "whitenoise",
            "meditation", "nature ambient", "ocean waves",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
    },
    "worship": {
        "title": "✝️ Uplifting Christian Worship - 1 Hour | Praise & Adoration",
        "description": """✝️ Powerful worship music to lift your spirit.

Perfect for:
• Morning devotion
• Worship sessions
• Prayer time
• Encouragement

🎤 Let these songs draw you closer to God
🙏 May His presence fill your day

📖 "Enter His gates with thanksgiving" - Psalm 100:4

#christianworship #praiseandworship #christianmusic #worship2025 #godmusic #faith""",
        "tags": [
            "christian worship", "praise and worship", "christian music", "worship music",
            "christian", "god", "faith", "encouragement",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
    },
    "shorts": {
        "title": "🌅 60-Second Peace | Morning Meditation",
        "description": """🌅 Start your day with 60 seconds of peace.

#shorts #meditation #mindfulness #peace #morning #relax""",
        "tags": [
            "shorts", "meditation", "peace", "mindfulness", "morning", "relax", "60 seconds",
        ],
        "categoryId": YouTube.CATEGORY_PEOPLE_BLOGS,
        "privacyStatus": "public",
        "durationClass": "short",
    },
    "bedtime_prayer": {
        "title": "🌙 Sleep Prayer Meditation - 1 Hour | Rest in God's Presence",
        "description": """🌙 Let go of the day and find peace in God's presence.

Perfect for:
• Falling asleep
• Night prayer
• Stress relief
• Spiritual rest

✨ Rest in His love as you sleep
🙏 Surrender your worries to Him

📖 "In peace I will lie down and sleep" - Psalm 4:8

#bedtimeprayer #sleep #christianmeditation #nightprayer #peace #godlove #spiritualrest""",
        "tags": [
            "bedtime prayer", "sleep", "christian meditation", "night prayer", "peace",
            "god love", "spiritual rest", "sleep worship", "prayer music",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Sleep Prayer",
    },
    "morning_devotion": {
        "title": "☀️ Morning Devotional - 1 Hour | Start Your Day with God",
        "description": """☀️ Begin your morning in His presence.

Perfect for:
• Morning routine
• Daily devotion
• Positive start
• Spiritual encouragement

🌅 Let His word guide your day
🙏 May God bless your day ahead

📖 "This is the day the Lord has made" - Psalm 118:24

#morningdevotion #morningprayer #devotional #god #faith #christian #startyourday #blessed""",
        "tags": [
            "morning devotion", "morning prayer", "devotional", "god", "faith", "christian",
            "daily bread", "spiritual morning", "encouragement",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Morning Devotions",
    },
    "scripture_ambient": {
        "title": "📖 Scripture Meditation - KJV | Psalm 23 - 1 Hour",
        "description": """📖 Meditate on God's Word with peaceful ambient music.

Featured Scripture:
"The Lord is my shepherd; I shall not want.
He maketh me to lie down in green pastures..."

🎧 Listen and reflect on His promises
✨ Let His word sink into your heart

📖 Psalm 23 (KJV)

#scripture #psalm23 #bible #christian #meditation #godword #faith #kjv #biblemeditation""",
        "tags": [
            "scripture", "psalm 23", "bible", "christian meditation", "god word", "faith",
            "kjv", "bible meditation", "word of god", "bible study music",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Scripture Meditations",
    },
    "gospel_testimony": {
        "title": "✝️ Gospel Music Mix - 1 Hour | Praise & Worship",
        "description": """✝️ Uplifting gospel music to strengthen your faith.

Perfect for:
• Gospel music lovers
• Praise and worship
• Encouragement
• Spiritual upliftment

🎤 Feel the power of His love through music
🙏 Let the songs lift your spirit

#gospel #gospelmusic #christianmusic #praise #worship #god #faith #uplifting #blessed""",
        "tags": [
            "gospel", "gospel music", "christian music", "praise", "worship", "god",
            "faith", "uplifting", "gospel mix", "christian",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Gospel Mix",
    },
    "piano_worship": {
        "title": "🎹 Peaceful Piano Worship - 1 Hour | Soft Christian Piano",
        "description": """🎹 Beautiful piano melodies for worship and reflection.

Perfect for:
• Worship time
• Prayer
• Study
• Relaxation

✨ Let the gentle piano lead you to His presence
🙏 Pure worship music for your soul

#pianoworship #christianpiano #worshipmusic #piano #peaceful #god #faith #christianmusic""",
        "tags": [
            "piano worship", "christian piano", "worship music", "piano", "peaceful",
            "god", "faith", "christian music", "instrumental", "soft piano",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Piano Worship",
    },
    "nature_faith": {
        "title": "🌿 Nature & Worship - 1 Hour | Scenic Views with Christian Lofi",
        "description": """🌿 Stunning nature visuals with worship lofi beats.

Perfect for:
• Relaxation
• Nature appreciation
• Worship
• Background study

🍃 Beautiful nature scenes + faith-filled music
✨ Connect with God's creation

📖 "The heavens declare the glory of God" - Psalm 19:1

#nature #christianlofi #worship #natureviews #scenic #relax #faith #godcreation""",
        "tags": [
            "nature", "christian lofi", "worship", "nature views", "scenic", "relax",
            "faith", "god creation", "nature worship", "nature lofi",
        ],
        "categoryId": YouTube.CATEGORY_MUSIC,
        "privacyStatus": "public",
        "playlist": "Nature & Faith",
    },
}


@dataclass(frozen=True)
class TemplateRegistry:
    """Static catalog of templates with a designated default.

    The catalog is fixed once constructed. ``resolve`` never raises for an
    unknown key: it falls back to the default template.
    """

    templates: Mapping[str, Template]
    default_key: str = DEFAULT_TEMPLATE_KEY
    _order: tuple[str, ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        if self.default_key not in self.templates:
            raise ConfigurationError(
                f"Default template '{self.default_key}' is not in the catalog"
            )
        object.__setattr__(self, "templates", MappingProxyType(dict(self.templates)))
        object.__setattr__(self, "_order", tuple(self.templates))

    @classmethod
    def from_entries(
        cls, entries: dict[str, dict], default_key: str = DEFAULT_TEMPLATE_KEY
    ) -> "TemplateRegistry":
        """Build a registry from raw catalog entries."""
        templates = {key: Template.from_dict(key, data) for key, data in entries.items()}
        return cls(templates=templates, default_key=default_key)

    @classmethod
    def from_file(cls, path: Path, default_key: str = DEFAULT_TEMPLATE_KEY) -> "TemplateRegistry":
        """Load a registry from a JSON catalog file."""
        try:
            with open(path, encoding="utf-8") as f:
                entries = json.load(f)
            registry = cls.from_entries(entries, default_key)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Template catalog not found: {path}") from e
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"Template catalog {path} is unreadable or invalid: {e}") from e

        logger.info("template_catalog_loaded", path=str(path), count=len(registry))
        return registry

    @classmethod
    def builtin(cls, default_key: str = DEFAULT_TEMPLATE_KEY) -> "TemplateRegistry":
        """Registry over the built-in catalog."""
        return cls.from_entries(TEMPLATES, default_key)

    @property
    def default(self) -> Template:
        return self.templates[self.default_key]

    def resolve(self, key: str | None = None) -> Template:
        """Resolve a template key, falling back to the default.

        Args:
            key: Template key; None, empty or unknown selects the default

        Returns:
            The matching template or the catalog default
        """
        if not key:
            return self.default

        template = self.templates.get(key)
        if template is None:
            logger.warning("unknown_template_key", key=key, fallback=self.default_key)
            return self.default
        return template

    def keys(self) -> tuple[str, ...]:
        return self._order

    def __contains__(self, key: object) -> bool:
        return key in self.templates

    def __iter__(self) -> Iterator[Template]:
        return (self.templates[key] for key in self._order)

    def __len__(self) -> int:
        return len(self.templates)


def load_registry(
    templates_file: Path | None = None, default_key: str = DEFAULT_TEMPLATE_KEY
) -> TemplateRegistry:
    """Load the catalog from a file when configured, otherwise the built-in one."""
    if templates_file is not None:
        return TemplateRegistry.from_file(templates_file, default_key)
    return TemplateRegistry.builtin(default_key)
