from xml.sax.saxutils import escape, quoteattr

from schemas import SneakerConfiguration

VIEW_BOX = "0 0 400 200"

SOLE_PATH = ("M40 160 C40 160, 60 175, 200 175 C340 175, 360 160, 360 160 L360 150 "
             "C360 150, 340 165, 200 165 C60 165, 40 150, 40 150 Z")
UPPER_PATH = ("M50 150 C50 120, 70 80, 120 60 C170 40, 220 45, 280 55 C340 65, 360 90, "
              "360 120 L360 150 C360 150, 340 160, 200 160 C60 160, 50 150, 50 150 Z")
LOGO_PATH = "M100 130 C130 115, 200 95, 280 85 C260 95, 200 110, 130 125 C115 128, 105 130, 100 130 Z"
TONGUE_PATH = "M75 100 C70 85, 80 55, 115 45 L125 50 C95 60, 85 85, 88 98 Z"
HEEL_TAB_PATH = "M50 140 C50 130, 52 120, 55 115 L60 118 C58 123, 56 130, 56 138 Z"
LACE_PATHS = ["M85 98 L125 78", "M90 92 L128 73", "M95 86 L130 68", "M100 80 L132 63"]
EYELETS = [(85, 98), (125, 78), (90, 92), (128, 73)]

SHINY_OVERLAY = (
    '<defs><linearGradient id="shinyGradient" x1="0%" y1="0%" x2="100%" y2="100%">'
    '<stop offset="0%" stop-color="white" stop-opacity="0.15"/>'
    '<stop offset="50%" stop-color="white" stop-opacity="0"/>'
    '<stop offset="100%" stop-color="white" stop-opacity="0.1"/>'
    '</linearGradient></defs>'
    f'<path d="{UPPER_PATH}" fill="url(#shinyGradient)"/>'
)


def _path(d: str, **attrs: str) -> str:
    rendered = "".join(f" {k.replace('_', '-')}={quoteattr(v)}" for k, v in attrs.items())
    return f'<path d="{d}"{rendered}/>'


def render_sneaker_svg(config: SneakerConfiguration) -> str:
    """Static SVG preview of a configuration."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{VIEW_BOX}" fill="none">',
        _path(SOLE_PATH, fill=config.sole),
        _path(UPPER_PATH, fill=config.upper),
        _path(LOGO_PATH, fill=config.logo),
        "<g>",
    ]
    parts += [_path(d, stroke=config.laces, stroke_width="3", stroke_linecap="round") for d in LACE_PATHS]
    parts.append("</g>")
    parts.append(f"<g fill={quoteattr(config.sole)}>")
    parts += [f'<circle cx="{x}" cy="{y}" r="3"/>' for x, y in EYELETS]
    parts.append("</g>")
    parts.append(_path(TONGUE_PATH, fill=config.upper, opacity="0.9"))
    parts.append(_path(HEEL_TAB_PATH, fill=config.logo))
    if config.customText:
        parts.append(
            f'<text x="230" y="140" text-anchor="middle" font-family="Arial, sans-serif" '
            f'font-size="14" font-weight="bold" fill={quoteattr(config.logo)}>{escape(config.customText)}</text>'
        )
    if config.material == "shiny":
        parts.append(SHINY_OVERLAY)
    parts.append("</svg>")
    return "".join(parts)
