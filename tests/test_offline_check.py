"""Tests for static offline-compatibility checks."""

from resume_pdf.templates.offline_check import (
    OfflineReport,
    check_assets,
    check_fonts,
    check_html,
    check_offline_compatibility,
)

CLEAN_HTML = (
    "<html><head><style>body { font-family: Arial, sans-serif; }</style></head>"
    "<body><p>Hello</p></body></html>"
)


class TestCheckHtml:
    def test_clean(self):
        report = check_html(CLEAN_HTML)
        assert report.is_offline_compatible
        assert report.warnings == []

    def test_external_stylesheet(self):
        html = CLEAN_HTML.replace(
            "<head>", '<head><link rel="stylesheet" href="https://cdnjs.cloudflare.com/x.css">'
        )
        report = check_html(html)
        assert not report.is_offline_compatible
        assert any("External links found" in i for i in report.issues)
        assert "CDNJS reference" in report.issues

    def test_analytics(self):
        report = check_html(CLEAN_HTML + "<script>gtag('config')</script>")
        assert "Google Tag Manager tracking" in report.issues
        assert any("JavaScript detected" in w for w in report.warnings)

    def test_no_styles_warning(self):
        report = check_html("<html><body>x</body></html>")
        assert any("No inline styles" in w for w in report.warnings)


class TestCheckFonts:
    def test_system_font_ok(self):
        assert check_fonts(CLEAN_HTML).warnings == []

    def test_custom_font_warning(self):
        report = check_fonts("<style>h1 { font-family: 'Fira Code'; }</style>")
        assert report.warnings == ["Non-system font detected: font-family: 'Fira Code'"]

    def test_remote_font_face(self):
        html = "<style>@font-face { font-family: X; src: url('https://example.com/x.woff2'); }</style>"
        assert "External font URL in @font-face declaration" in check_fonts(html).issues


class TestCheckAssets:
    def test_linked_image(self):
        report = check_assets(CLEAN_HTML + '<img src="photo.png">')
        assert any("External image reference" in i for i in report.issues)

    def test_data_url_image(self):
        report = check_assets(CLEAN_HTML + '<img src="data:image/png;base64,AAAA">')
        assert report.is_offline_compatible
        assert "Found 1 data URLs (good for offline)" in report.warnings


class TestCheckOfflineCompatibility:
    def test_combines_reports(self):
        html = '<link href="https://fonts.googleapis.com/css?family=Roboto">'
        report = check_offline_compatibility(html)
        assert "Google Fonts CDN reference" in report.issues
        assert not report.is_offline_compatible

    def test_merge(self):
        merged = OfflineReport(["a"], ["w"]).merge(OfflineReport(["b"], []))
        assert merged.issues == ["a", "b"]
        assert merged.warnings == ["w"]
