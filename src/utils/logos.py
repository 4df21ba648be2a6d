"""
Team logo references.
"""

import base64

# ESPN CDN base URL for team logos
_ESPN_LOGO_BASE = "https://a.espncdn.com/i/teamlogos/nhl/500"

# NHL abbreviations that ESPN spells differently
_ESPN_CORRECTIONS = {
    'SJS': 'sj',
    'LAK': 'la',
    'TBL': 'tb',
    'NJD': 'nj',
    'UTA': 'utah',
    'VGK': 'vgs',
}


def get_espn_logo_url(abbrev: str) -> str:
    """Return the ESPN PNG logo URL for an NHL team abbreviation."""
    code = (abbrev or '').upper()
    slug = _ESPN_CORRECTIONS.get(code, code.lower())
    return f"{_ESPN_LOGO_BASE}/{slug}.png"


def svg_data_uri(content: bytes) -> str:
    """Encode raw SVG bytes as an inline data URI."""
    encoded = base64.b64encode(content).decode('ascii')
    return f"data:image/svg+xml;base64,{encoded}"
