"""Static checks that rendered HTML does not reference anything off-machine.

The renderer runs these after every render and only logs the result; the
network policy on the renderer pool is what actually blocks requests.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_EXTERNAL_REFERENCES = [
    (re.compile(r"@import\s+url\s*\(", re.I), "CSS @import declarations found"),
    (re.compile(r"src\s*=\s*[\"']https?:", re.I), "External script/image sources found"),
    (re.compile(r"href\s*=\s*[\"']https?:", re.I), "External links found"),
    (re.compile(r"url\s*\(\s*[\"']?https?:", re.I), "External CSS background URLs found"),
    (re.compile(r"<script[^>]*src\s*=\s*[\"']?https?:", re.I), "External scripts found"),
    (re.compile(r"<link[^>]*href\s*=\s*[\"']?https?:", re.I), "External stylesheets found"),
]

_CDN_HOSTS = [
    (re.compile(r"fonts\.googleapis\.com", re.I), "Google Fonts CDN reference"),
    (re.compile(r"fonts\.gstatic\.com", re.I), "Google Fonts static CDN reference"),
    (re.compile(r"cdnjs\.cloudflare\.com", re.I), "CDNJS reference"),
    (re.compile(r"unpkg\.com", re.I), "unpkg CDN reference"),
    (re.compile(r"jsdelivr\.net", re.I), "jsDelivr CDN reference"),
    (re.compile(r"fontawesome\.com", re.I), "Font Awesome CDN reference"),
]

_ANALYTICS = [
    (re.compile(r"google-analytics", re.I), "Google Analytics tracking"),
    (re.compile(r"gtag\(", re.I), "Google Tag Manager tracking"),
    (re.compile(r"mixpanel", re.I), "Mixpanel analytics"),
    (re.compile(r"segment\.com", re.I), "Segment analytics"),
]

_EXTERNAL_ASSETS = [
    (
        re.compile(r"src\s*=\s*[\"'](?!data:)[^\"']*\.(?:png|jpg|jpeg|gif|svg|ico)", re.I),
        "External image reference",
    ),
    (
        re.compile(r"url\s*\(\s*[\"']?(?!data:)[^\"')]*\.(?:png|jpg|jpeg|gif|svg|ico)", re.I),
        "External background image",
    ),
    (
        re.compile(r"<link[^>]*href\s*=\s*[\"'][^\"']*\.(?:css|js)", re.I),
        "External stylesheet/script link",
    ),
]

SYSTEM_FONTS = (
    "arial", "calibri", "times new roman", "georgia", "helvetica",
    "verdana", "tahoma", "trebuchet ms", "courier new", "impact",
    "sans-serif", "serif", "monospace", "cursive", "fantasy",
)

_FONT_FAMILY = re.compile(r"font-family:\s*[^;}]+", re.I)
_FONT_FACE = re.compile(r"@font-face\s*{[^}]*}", re.I | re.S)
_REMOTE_URL = re.compile(r"url\s*\(\s*[\"']?https?:", re.I)


@dataclass
class OfflineReport:
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_offline_compatible(self) -> bool:
        return not self.issues

    def merge(self, other: OfflineReport) -> OfflineReport:
        return OfflineReport(self.issues + other.issues, self.warnings + other.warnings)


def check_html(html: str) -> OfflineReport:
    """Flag external URLs, CDN hosts and analytics hooks."""
    report = OfflineReport()
    for pattern, message in _EXTERNAL_REFERENCES:
        matches = pattern.findall(html)
        if matches:
            shown = ", ".join(matches[:3]) + ("..." if len(matches) > 3 else "")
            report.issues.append(f"{message}: {shown}")
    for pattern, message in _CDN_HOSTS + _ANALYTICS:
        if pattern.search(html):
            report.issues.append(message)

    if "<script" in html:
        report.warnings.append("JavaScript detected - ensure it doesn't make network calls")
    if "<style>" not in html and "style=" not in html:
        report.warnings.append("No inline styles detected - ensure CSS is embedded")
    return report


def check_fonts(html: str) -> OfflineReport:
    """Flag non-system font families and remote @font-face sources."""
    report = OfflineReport()
    for declaration in _FONT_FAMILY.findall(html):
        if not any(font in declaration.lower() for font in SYSTEM_FONTS):
            report.warnings.append(f"Non-system font detected: {declaration.strip()}")
    for font_face in _FONT_FACE.findall(html):
        if _REMOTE_URL.search(font_face):
            report.issues.append("External font URL in @font-face declaration")
    return report


def check_assets(html: str) -> OfflineReport:
    """Flag linked images, stylesheets and scripts that are not embedded."""
    report = OfflineReport()
    for pattern, message in _EXTERNAL_ASSETS:
        matches = pattern.findall(html)
        if matches:
            report.issues.append(f"{message}: {', '.join(matches[:2])}")
    if "<style>" not in html:
        report.warnings.append("No inline styles found - ensure CSS is embedded")
    data_urls = len(re.findall(r"data:", html, re.I))
    if data_urls:
        report.warnings.append(f"Found {data_urls} data URLs (good for offline)")
    return report


def check_offline_compatibility(html: str) -> OfflineReport:
    """Run every offline check and combine the results."""
    return check_html(html).merge(check_fonts(html)).merge(check_assets(html))
