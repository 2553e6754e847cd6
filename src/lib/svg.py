"""
SVG widgets for the visual macros

Both builders return a standalone <svg> element sized from its text. Every
piece of user text is XML-escaped before it is placed in the markup.
"""

import math
from typing import List, Optional, Union
from xml.sax.saxutils import escape

Number = Union[int, float]

# Percentage donut geometry
SIZE = 160
STROKE = 18
RADIUS = (SIZE - STROKE) / 2
CIRCUMFERENCE = 2 * math.pi * RADIUS
TITLE_HEIGHT = 70
EXTRA_WIDTH = 80
SVG_WIDTH = SIZE + EXTRA_WIDTH
TITLE_FONT_SIZE = 22
VALUE_FONT_SIZE = 32
LEGEND_FONT_SIZE = 18
TITLE_Y = 36
LINE_SPACING = 1.2
TITLE_WRAP = 24
COLOUR_RED = "#b22217"

# Score card layout
PADDING = 24
SCORE_TITLE_SIZE = 16
SCORE_VALUE_SIZE = 48
SCORE_UNIT_SIZE = 24
SCORE_CAPTION_SIZE = 14
UNIT_OFFSET = 3
LINE_GAP = 16
# Average glyph width relative to font size for a Helvetica-like face
CHAR_WIDTH_RATIO = 0.6
BOLD_WIDTH_RATIO = 0.66


def number_format(value: Number) -> str:
    """Render a number the way it was most likely written (85.0 -> '85')"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def text_wrap(text: str, width: int) -> List[str]:
    """
    Split text into lines of at most width characters, breaking at spaces

    Single words longer than width get a line of their own.

    Example:
        >>> text_wrap("Share of completed work items", 12)
        ['Share of', 'completed', 'work items']
    """
    lines: List[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if len(candidate) > width:
            if current:
                lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def textWidth_estimate(text: str, fontSize: int, bold: bool = False) -> float:
    ratio = BOLD_WIDTH_RATIO if bold else CHAR_WIDTH_RATIO
    return len(text) * fontSize * ratio


def percentage_svg(title: str, value: Number, legend: str, colour: Optional[str] = None) -> str:
    """
    Donut chart showing value percent, with a wrapped title and a legend

    Args:
        title: Heading above the donut
        value: Percentage, normally 0-100
        legend: Caption below the number
        colour: Arc colour name; blue when omitted, red uses the brand red

    Returns:
        SVG markup
    """
    colour = colour or "blue"
    stroke = COLOUR_RED if colour == "red" else colour
    offset = CIRCUMFERENCE * (1 - value / 100)
    centre_x = SVG_WIDTH / 2

    title_lines = text_wrap(title, TITLE_WRAP)
    donut_top = (
        TITLE_Y
        + (max(len(title_lines), 1) - 1) * TITLE_FONT_SIZE * LINE_SPACING
        + TITLE_FONT_SIZE
        + 24
    )
    centre_y = donut_top + SIZE / 2 - TITLE_HEIGHT / 2
    height = donut_top + SIZE / 2 + RADIUS + 20

    tspans = "".join(
        f"<tspan x='{centre_x}' dy='{0 if i == 0 else LINE_SPACING}em'>{escape(line)}</tspan>"
        for i, line in enumerate(title_lines)
    )

    return f"""
<svg width="{SVG_WIDTH}" height="{height}" viewBox="0 0 {SVG_WIDTH} {height}" xmlns="http://www.w3.org/2000/svg">
  <style>
    .percentage-text {{ fill: var(--joy-palette-text-primary, #333); }}
    .percentage-legend {{ fill: var(--joy-palette-text-secondary, #666); }}
  </style>
  <title>{escape(title)}</title>
  <text class="percentage-text" x="{centre_x}" y="{TITLE_Y}" text-anchor="middle" font-size="{TITLE_FONT_SIZE}" font-weight="bold">
    {tspans}
  </text>
  <circle cx="{centre_x}" cy="{centre_y}" r="{RADIUS}"
          fill="none" stroke="#eee" stroke-width="{STROKE}" />
  <circle cx="{centre_x}" cy="{centre_y}" r="{RADIUS}"
          fill="none" stroke="{escape(stroke)}" stroke-width="{STROKE}"
          stroke-dasharray="{CIRCUMFERENCE}" stroke-dashoffset="{offset}"
          stroke-linecap="butt"
          transform="rotate(-90 {centre_x} {centre_y})" />
  <text class="percentage-text" x="{centre_x}" y="{centre_y - 8}" text-anchor="middle" font-size="{VALUE_FONT_SIZE}" font-weight="bold">{number_format(value)}%</text>
  <text class="percentage-legend" x="{centre_x}" y="{centre_y + 20}" text-anchor="middle" font-size="{LEGEND_FONT_SIZE}">{escape(legend)}</text>
</svg>
"""


def scoreCard_svg(
    value: Number,
    title: Optional[str] = None,
    unit: Optional[str] = None,
    legend: Optional[str] = None,
) -> str:
    """
    Rounded card with a large value, an optional unit, title and caption

    Width is estimated from character counts, so no font metrics are needed.
    """
    title = title or ""
    unit = unit or ""
    legend = legend or ""
    value_text = number_format(value)

    value_line_width = (
        textWidth_estimate(value_text, SCORE_VALUE_SIZE, bold=True)
        + textWidth_estimate(unit, SCORE_UNIT_SIZE)
        + UNIT_OFFSET
    )
    text_width = max(
        textWidth_estimate(title, SCORE_TITLE_SIZE),
        value_line_width,
        textWidth_estimate(legend, SCORE_CAPTION_SIZE),
    )
    width = math.ceil(text_width + PADDING * 2)

    title_height = SCORE_TITLE_SIZE + LINE_GAP if title else 0
    caption_height = SCORE_CAPTION_SIZE + LINE_GAP if legend else 0
    height = math.ceil(title_height + SCORE_VALUE_SIZE + caption_height + PADDING * 2)
    centre_x = width / 2

    return f"""<svg class="card" width="{width}" height="{height}" viewBox="0 0 {width} {height}" xmlns="http://www.w3.org/2000/svg">
    <style>
      .scorecard-bg {{ fill: var(--joy-palette-background-surface, #fff); stroke: var(--joy-palette-divider, #dfe4ea); }}
      .scorecard-title {{ fill: var(--joy-palette-text-primary, #001829); }}
      .scorecard-value {{ fill: var(--joy-palette-text-primary, #333); }}
      .scorecard-caption {{ fill: var(--joy-palette-text-tertiary, #999); }}
    </style>
    <rect class="scorecard-bg" rx="8" ry="8" stroke-width="3" width="{width}" height="{height}"/>
    <g text-anchor="middle">
      <text class="scorecard-title" x="{centre_x}" y="{SCORE_TITLE_SIZE / 2 + PADDING}" font-size="{SCORE_TITLE_SIZE}" font-weight="400" dominant-baseline="middle">{escape(title)}</text>
      <text class="scorecard-value" x="{centre_x}" y="{title_height + SCORE_VALUE_SIZE / 2 + PADDING}" font-size="{SCORE_VALUE_SIZE}" font-weight="700" dominant-baseline="middle">{value_text}<tspan class="unit" font-size="{SCORE_UNIT_SIZE}" font-weight="400" dx="{UNIT_OFFSET}">{escape(unit)}</tspan></text>
      <text class="scorecard-caption" x="{centre_x}" y="{title_height + SCORE_VALUE_SIZE + LINE_GAP + SCORE_CAPTION_SIZE / 2 + PADDING}" font-size="{SCORE_CAPTION_SIZE}" font-weight="400" dominant-baseline="middle">{escape(legend)}</text>
    </g>
  </svg>"""
