"""Meme template catalog: built-in templates plus user-uploaded custom ones.

Custom templates are stored as JPEGs in ``custom_templates_dir`` with their
metadata in ``templates.json`` next to them.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CONTENT_TYPES = ("roast", "compliment")

# Default template per content type. Looked up by stem so any Pillow-readable
# format can be dropped in.
_DEFAULT_TEMPLATE_STEMS = {
    "roast": "roast-template",
    "compliment": "compliment-template",
}
_IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp", ".ppm")


@dataclass
class MemeTemplate:
    id: str
    name: str
    filename: str
    type: str  # roast | compliment | both
    style: str = "classic"  # funny | serious | classic | modern
    theme: str = "classic"  # reaction | classic | modern | custom
    tags: list[str] = field(default_factory=list)
    description: str = ""
    custom: bool = False
    width: int = 0
    height: int = 0
    box_count: int = 1
    captions: list[str] = field(default_factory=list)

    def matches_type(self, content_type: str) -> bool:
        return self.type in (content_type, "both")


BUILTIN_TEMPLATES: tuple[MemeTemplate, ...] = (
    MemeTemplate(
        id="skeptical",
        name="Skeptical Kid",
        filename="skeptical-kid.jpg",
        type="roast",
        style="funny",
        theme="reaction",
        tags=["doubt", "disbelief", "side-eye"],
        description="Perfect for sarcastic responses",
    ),
    MemeTemplate(
        id="success-kid",
        name="Success Kid",
        filename="success-kid.jpg",
        type="compliment",
        style="classic",
        theme="classic",
        tags=["victory", "achievement", "proud"],
        description="Celebrate those wins!",
    ),
    MemeTemplate(
        id="drake",
        name="Drake Hotline Bling",
        filename="drake.jpg",
        type="both",
        style="modern",
        theme="reaction",
        tags=["comparison", "preference", "choice"],
        description="Compare and contrast with style",
    ),
    MemeTemplate(
        id="doge",
        name="Doge",
        filename="doge.jpg",
        type="compliment",
        style="funny",
        theme="classic",
        tags=["wholesome", "cute", "animal"],
        description="The iconic Shiba Inu for wholesome content",
    ),
    MemeTemplate(
        id="distracted",
        name="Distracted Boyfriend",
        filename="distracted-boyfriend.jpg",
        type="roast",
        style="funny",
        theme="reaction",
        tags=["classic", "relationships", "choices"],
        description="Perfect for pointing out flaws or distractions",
    ),
    MemeTemplate(
        id="disaster-girl",
        name="Disaster Girl",
        filename="disaster-girl.jpg",
        type="roast",
        style="serious",
        theme="reaction",
        tags=["chaos", "sarcastic", "classic"],
        description="For when things are going terribly wrong",
    ),
    MemeTemplate(
        id="wholesome",
        name="Wholesome Seal",
        filename="wholesome-seal.jpg",
        type="compliment",
        style="funny",
        theme="classic",
        tags=["wholesome", "cute", "animal"],
        description="For extra wholesome compliments",
    ),
)


class TemplateCatalog:
    """Resolves template ids to files and keeps the custom template index."""

    def __init__(self, templates_dir: Path, custom_dir: Path | None = None) -> None:
        self.templates_dir = Path(templates_dir)
        self.custom_dir = Path(custom_dir) if custom_dir else self.templates_dir / "custom"
        self.index_file = self.custom_dir / "templates.json"
        self._lock = threading.Lock()
        self._custom: list[MemeTemplate] | None = None

    # ── Lookup ──

    def all(self) -> list[MemeTemplate]:
        return [*BUILTIN_TEMPLATES, *self._load_custom()]

    def for_type(self, content_type: str) -> list[MemeTemplate]:
        return [t for t in self.all() if t.matches_type(content_type)]

    def get(self, template_id: str) -> MemeTemplate | None:
        for t in self.all():
            if t.id == template_id:
                return t
        return None

    def path_for(self, template: MemeTemplate) -> Path:
        base = self.custom_dir if template.custom else self.templates_dir
        return base / template.filename

    def is_available(self, template: MemeTemplate) -> bool:
        return self.path_for(template).is_file()

    def resolve(self, reference: str) -> Path | None:
        """Map a template id (or bare filename) to a file inside the template dirs.

        Anything that would escape the template directories resolves to None.
        """
        template = self.get(reference)
        if template is not None:
            return self.path_for(template)
        if Path(reference).name != reference:
            return None
        for base in (self.templates_dir, self.custom_dir):
            candidate = base / reference
            if candidate.is_file():
                return candidate
        return None

    def default_path(self, content_type: str) -> Path:
        stem = _DEFAULT_TEMPLATE_STEMS[content_type]
        for suffix in _IMAGE_SUFFIXES:
            candidate = self.templates_dir / f"{stem}{suffix}"
            if candidate.is_file():
                return candidate
        return self.templates_dir / f"{stem}.jpg"

    # ── Custom templates ──

    def add_custom(self, template: MemeTemplate) -> MemeTemplate:
        template.custom = True
        template.theme = "custom"
        with self._lock:
            custom = [t for t in self._load_custom() if t.id != template.id]
            custom.append(template)
            self._save_custom(custom)
        logger.info("Added custom template %s (%s)", template.id, template.filename)
        return template

    def remove_custom(self, template_id: str) -> MemeTemplate | None:
        with self._lock:
            custom = self._load_custom()
            target = next((t for t in custom if t.id == template_id), None)
            if target is None:
                return None
            self._save_custom([t for t in custom if t.id != template_id])
        image = self.path_for(target)
        if image.is_file():
            image.unlink()
        logger.info("Removed custom template %s", template_id)
        return target

    def _load_custom(self) -> list[MemeTemplate]:
        if self._custom is not None:
            return self._custom
        if not self.index_file.exists():
            self._custom = []
            return self._custom
        try:
            raw = json.loads(self.index_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read custom template index %s: %s", self.index_file, e)
            raw = []
        if not isinstance(raw, list):
            logger.warning("Custom template index %s is not a list, ignoring it", self.index_file)
            raw = []
        custom = []
        for item in raw:
            try:
                custom.append(MemeTemplate(**item))
            except TypeError as e:
                logger.warning("Skipping malformed custom template entry %r: %s", item, e)
        self._custom = custom
        return self._custom

    def _save_custom(self, templates: list[MemeTemplate]) -> None:
        self.custom_dir.mkdir(parents=True, exist_ok=True)
        self.index_file.write_text(
            json.dumps([asdict(t) for t in templates], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        self._custom = templates


def filter_templates(
    templates: list[MemeTemplate],
    search: str = "",
    style: str = "",
    theme: str = "",
) -> list[MemeTemplate]:
    """Case-insensitive search over name/tags/description plus exact style/theme."""
    if not search and not style and not theme:
        return templates

    needle = search.lower()

    def _matches(t: MemeTemplate) -> bool:
        if needle and not (
            needle in t.name.lower()
            or any(needle in tag.lower() for tag in t.tags)
            or needle in t.description.lower()
        ):
            return False
        if style and t.style != style:
            return False
        if theme and t.theme != theme:
            return False
        return True

    return [t for t in templates if _matches(t)]
