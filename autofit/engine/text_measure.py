"""
text_measure.py — Measure text BEFORE choosing its font size.

PillowMeasurementOracle lays text out the way the canvas renderer does:
- Greedy line filling at word boundaries (or grapheme boundaries)
- Letter spacing in 1/1000 em between graphemes
- Stroke width eating into the wrap width and adding to the box
- Line boxes of size * 1.13 * line_height, last line without spacing

Pillow only supplies advance widths. Everything else is the layout model
above, so the numbers line up with what gets drawn later.
"""

import logging
import os
import platform
import unicodedata
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import ImageFont, features

from autofit.dsl.schema import FontStyle, StyleConfig, WrapMode
from .oracle import Measurement, MeasurementOracle
from .units import is_bold_weight, letter_spacing_px, text_block_height

logger = logging.getLogger(__name__)

# =============================================================================
# FONT CONFIGURATION
# =============================================================================

REGULAR = "regular"
BOLD = "bold"
ITALIC = "italic"
BOLD_ITALIC = "bold_italic"

# Font file mapping, keyed by lowercased family name
FONT_MAP: Dict[str, Dict[str, str]] = {
    'arial': {
        REGULAR: 'arial.ttf', BOLD: 'arialbd.ttf',
        ITALIC: 'ariali.ttf', BOLD_ITALIC: 'arialbi.ttf',
    },
    'helvetica': {
        REGULAR: 'Helvetica.ttc', BOLD: 'Helvetica.ttc',
        ITALIC: 'Helvetica.ttc', BOLD_ITALIC: 'Helvetica.ttc',
    },
    'calibri': {
        REGULAR: 'calibri.ttf', BOLD: 'calibrib.ttf',
        ITALIC: 'calibrii.ttf', BOLD_ITALIC: 'calibriz.ttf',
    },
    'times new roman': {
        REGULAR: 'times.ttf', BOLD: 'timesbd.ttf',
        ITALIC: 'timesi.ttf', BOLD_ITALIC: 'timesbi.ttf',
    },
    'dejavu sans': {
        REGULAR: 'DejaVuSans.ttf', BOLD: 'DejaVuSans-Bold.ttf',
        ITALIC: 'DejaVuSans-Oblique.ttf', BOLD_ITALIC: 'DejaVuSans-BoldOblique.ttf',
    },
    'liberation sans': {
        REGULAR: 'LiberationSans-Regular.ttf', BOLD: 'LiberationSans-Bold.ttf',
        ITALIC: 'LiberationSans-Italic.ttf', BOLD_ITALIC: 'LiberationSans-BoldItalic.ttf',
    },
    'roboto': {
        REGULAR: 'Roboto-Regular.ttf', BOLD: 'Roboto-Bold.ttf',
        ITALIC: 'Roboto-Italic.ttf', BOLD_ITALIC: 'Roboto-BoldItalic.ttf',
    },
    'open sans': {
        REGULAR: 'OpenSans-Regular.ttf', BOLD: 'OpenSans-Bold.ttf',
        ITALIC: 'OpenSans-Italic.ttf', BOLD_ITALIC: 'OpenSans-BoldItalic.ttf',
    },
}

# Family tried when the requested one is missing
FALLBACK_FONT_FAMILY = 'dejavu sans'

FONT_EXTENSIONS = ('.ttf', '.otf', '.ttc')

ZWJ = '\u200d'


def _system_font_dirs() -> List[Path]:
    """Common system font locations for the current platform."""
    if platform.system() == 'Windows':
        return [Path(os.environ.get('WINDIR', 'C:/Windows')) / 'Fonts']
    if platform.system() == 'Darwin':
        return [
            Path('/System/Library/Fonts'),
            Path('/Library/Fonts'),
            Path.home() / 'Library' / 'Fonts',
        ]
    return [
        Path('/usr/share/fonts'),
        Path('/usr/local/share/fonts'),
        Path.home() / '.fonts',
    ]


def font_variant(style: StyleConfig) -> str:
    """Pick the font file variant for a style."""
    bold = is_bold_weight(style.font_weight)
    italic = style.font_style == FontStyle.ITALIC
    if bold and italic:
        return BOLD_ITALIC
    if bold:
        return BOLD
    if italic:
        return ITALIC
    return REGULAR


# =============================================================================
# GRAPHEMES
# =============================================================================

def _extends_cluster(ch: str) -> bool:
    """True for code points that attach to the preceding grapheme."""
    code = ord(ch)
    if ch == ZWJ:
        return True
    if 0xFE00 <= code <= 0xFE0F:  # Variation selectors
        return True
    if 0x1F3FB <= code <= 0x1F3FF:  # Emoji skin tone modifiers
        return True
    return unicodedata.category(ch) in ('Mn', 'Mc', 'Me')


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def _hangul_type(ch: str) -> Optional[str]:
    """Hangul syllable type: L, V, T, LV, LVT or None."""
    code = ord(ch)
    if 0x1100 <= code <= 0x115F or 0xA960 <= code <= 0xA97C:
        return 'L'
    if 0x1160 <= code <= 0x11A7 or 0xD7B0 <= code <= 0xD7C6:
        return 'V'
    if 0x11A8 <= code <= 0x11FF or 0xD7CB <= code <= 0xD7FB:
        return 'T'
    if 0xAC00 <= code <= 0xD7A3:
        return 'LV' if (code - 0xAC00) % 28 == 0 else 'LVT'
    return None


def _joins_previous(cluster: str, ch: str) -> bool:
    """True when ``ch`` continues ``cluster`` instead of starting a new one."""
    if _extends_cluster(ch) or cluster.endswith(ZWJ):
        return True

    # Flags are pairs of regional indicators
    if _is_regional_indicator(ch):
        return len(cluster) == 1 and _is_regional_indicator(cluster)

    prev = _hangul_type(cluster[-1])
    cur = _hangul_type(ch)
    if prev is None or cur is None:
        return False
    if prev == 'L':
        return cur in ('L', 'V', 'LV', 'LVT')
    if prev in ('LV', 'V'):
        return cur in ('V', 'T')
    return cur == 'T'


def split_graphemes(text: str) -> List[str]:
    """Split text into user-perceived characters.

    Approximates extended grapheme clusters: a base character plus any
    combining marks, variation selectors and ZWJ-joined successors,
    regional indicator pairs (flags) and conjoining Hangul jamo.
    """
    clusters: List[str] = []
    for ch in text:
        if clusters and _joins_previous(clusters[-1], ch):
            clusters[-1] += ch
        else:
            clusters.append(ch)
    return clusters


# =============================================================================
# ORACLE
# =============================================================================

class PillowMeasurementOracle(MeasurementOracle):
    """Text measurement backed by Pillow's FreeType bindings.

    Instances cache loaded fonts; the cache is private scratch state and is
    never shared between instances. Use one instance per thread.
    """

    def __init__(
        self,
        font_dirs: Optional[Iterable[str]] = None,
        font_map: Optional[Dict[str, Dict[str, str]]] = None,
        include_system_fonts: bool = True,
    ):
        self.font_dirs = [Path(d) for d in (font_dirs or [])]
        if include_system_fonts:
            self.font_dirs.extend(_system_font_dirs())
        self.font_map = {k.lower(): v for k, v in (font_map or FONT_MAP).items()}
        self._font_index: Optional[Dict[str, Path]] = None
        self._path_cache: Dict[Tuple[str, str], Optional[Path]] = {}
        self._font_cache: Dict[Tuple[Optional[Path], int], ImageFont.FreeTypeFont] = {}

    @property
    def available(self) -> bool:
        return features.check('freetype2')

    def clear_cache(self) -> None:
        """Clear the font caches (useful for testing)."""
        self._font_cache.clear()
        self._path_cache.clear()
        self._font_index = None

    # -------------------------------------------------------------------------
    # Font loading
    # -------------------------------------------------------------------------

    def _index_fonts(self) -> Dict[str, Path]:
        """Map lowercased font file names to paths, first directory wins."""
        if self._font_index is None:
            index: Dict[str, Path] = {}
            for font_dir in self.font_dirs:
                if not font_dir.is_dir():
                    continue
                for path in sorted(font_dir.rglob('*')):
                    if path.suffix.lower() in FONT_EXTENSIONS:
                        index.setdefault(path.name.lower(), path)
            self._font_index = index
        return self._font_index

    def _candidate_files(self, family: str, variant: str) -> List[str]:
        entry = self.font_map.get(family)
        if entry:
            return [entry.get(variant, entry[REGULAR]), entry[REGULAR]]

        # Unknown family: guess conventional file names
        stem = family.replace(' ', '')
        suffix = {
            REGULAR: 'Regular', BOLD: 'Bold',
            ITALIC: 'Italic', BOLD_ITALIC: 'BoldItalic',
        }[variant]
        return [
            f'{stem}-{suffix}{ext}' for ext in FONT_EXTENSIONS
        ] + [f'{stem}{ext}' for ext in FONT_EXTENSIONS]

    def resolve_font_path(self, style: StyleConfig) -> Optional[Path]:
        """Find the font file for a style, or None to use Pillow's default font."""
        family = style.font_family.strip().lower()
        variant = font_variant(style)
        cache_key = (family, variant)
        if cache_key in self._path_cache:
            return self._path_cache[cache_key]

        index = self._index_fonts()
        path = None
        for filename in self._candidate_files(family, variant):
            path = index.get(filename.lower())
            if path:
                break

        if path is None and family != FALLBACK_FONT_FAMILY:
            for filename in self._candidate_files(FALLBACK_FONT_FAMILY, variant):
                path = index.get(filename.lower())
                if path:
                    break
            logger.warning(
                f"Font '{style.font_family}' ({variant}) not found, "
                f"falling back to {path.name if path else 'built-in default'}"
            )
        elif path is None:
            logger.warning(f"Font '{style.font_family}' ({variant}) not found, using built-in default")

        self._path_cache[cache_key] = path
        return path

    def get_font(self, style: StyleConfig, size: int) -> ImageFont.FreeTypeFont:
        """Load a font for measurement. Falls back gracefully if not found."""
        path = self.resolve_font_path(style)
        cache_key = (path, size)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        font = None
        if path is not None:
            try:
                font = ImageFont.truetype(str(path), size)
            except OSError as e:
                logger.warning(f"Could not load font {path}: {e}")

        if font is None:
            # Scalable built-in font (Pillow >= 10.1 with FreeType)
            font = ImageFont.load_default(size)

        self._font_cache[cache_key] = font
        return font

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    @staticmethod
    def _line_width(line: str, font: ImageFont.FreeTypeFont, spacing: float) -> float:
        if not line:
            return 0.0
        gaps = len(split_graphemes(line)) - 1
        return font.getlength(line) + spacing * gaps

    def _break_graphemes(
        self,
        text: str,
        font: ImageFont.FreeTypeFont,
        spacing: float,
        wrap_width: float,
    ) -> List[str]:
        """Greedy fill at grapheme boundaries. Never returns an empty list."""
        lines: List[str] = []
        current = ''
        for grapheme in split_graphemes(text):
            candidate = current + grapheme
            if current and self._line_width(candidate, font, spacing) > wrap_width:
                lines.append(current)
                current = grapheme
            else:
                current = candidate
        lines.append(current)
        return lines

    def _wrap_words(
        self,
        paragraph: str,
        font: ImageFont.FreeTypeFont,
        spacing: float,
        wrap_width: float,
    ) -> List[str]:
        # Runs of spaces survive as empty words; a line break consumes one space
        lines: List[str] = []
        line_words: List[str] = []
        for word in paragraph.split(' '):
            if line_words:
                candidate = ' '.join(line_words + [word])
                if self._line_width(candidate, font, spacing) <= wrap_width:
                    line_words.append(word)
                    continue
                lines.append(' '.join(line_words))
                line_words = []

            if self._line_width(word, font, spacing) <= wrap_width:
                line_words = [word]
            else:
                # Overlong word: break it so the overflow shows up as lines
                pieces = self._break_graphemes(word, font, spacing, wrap_width)
                lines.extend(pieces[:-1])
                line_words = [pieces[-1]]

        lines.append(' '.join(line_words))
        return lines

    def wrap_text(
        self,
        text: str,
        box_width: float,
        size: int,
        style: StyleConfig,
    ) -> List[str]:
        """Split text into the lines the renderer would draw.

        Args:
            text: Text to wrap. Explicit newlines start new paragraphs.
            box_width: Width of the text box in px.
            size: Font size in px.
            style: Layout style.

        Returns:
            Wrapped lines (an empty paragraph yields one empty line).
        """
        font = self.get_font(style, size)
        spacing = letter_spacing_px(style.letter_spacing, size)
        wrap_width = box_width - style.stroke_width

        lines: List[str] = []
        for paragraph in text.split('\n'):
            if style.wrap_mode == WrapMode.CHARACTER:
                if paragraph:
                    lines.extend(self._break_graphemes(paragraph, font, spacing, wrap_width))
                else:
                    lines.append('')
            else:
                lines.extend(self._wrap_words(paragraph, font, spacing, wrap_width))
        return lines

    def measure(
        self,
        text: str,
        box_width: float,
        size: int,
        style: StyleConfig,
    ) -> Measurement:
        lines = self.wrap_text(text, box_width, size, style)
        font = self.get_font(style, size)
        spacing = letter_spacing_px(style.letter_spacing, size)

        widest = max((self._line_width(line, font, spacing) for line in lines), default=0.0)
        height = text_block_height(size, style.line_height, len(lines))

        return Measurement(
            rendered_height=height + style.stroke_width,
            line_count=len(lines),
            rendered_width=widest + style.stroke_width,
            lines=tuple(lines),
        )
