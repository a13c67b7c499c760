"""Tests for logo derivation."""

from bs4 import BeautifulSoup

from hiddenjobs.extraction.logo import clearbit_logo, derive_logo, favicon, is_image_url

PAGE = "https://boards.greenhouse.io/acme/jobs/1"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestClearbit:
    def test_suffixes_stripped(self) -> None:
        assert clearbit_logo("Acme Inc.") == "https://logo.clearbit.com/acme.com"

    def test_multiword(self) -> None:
        assert clearbit_logo("Globex Technologies") == "https://logo.clearbit.com/globex.com"

    def test_nothing_left(self) -> None:
        assert clearbit_logo("The Company") is None
        assert clearbit_logo(None) is None


class TestDeriveLogo:
    def test_vendor_element(self) -> None:
        soup = _soup('<div class="company-logo"><img src="/img/acme.png"></div>')
        assert derive_logo("Acme", PAGE, soup) == "https://boards.greenhouse.io/img/acme.png"

    def test_custom_selectors(self) -> None:
        soup = _soup('<div class="main-header-logo"><img src="//cdn.acme.com/l.svg"></div>')
        logo = derive_logo("Acme", PAGE, soup, (".main-header-logo img",))
        assert logo == "https://cdn.acme.com/l.svg"

    def test_meta_image(self) -> None:
        soup = _soup('<meta property="og:image" content="https://cdn.acme.com/social">')
        assert derive_logo("Acme", PAGE, soup) == "https://cdn.acme.com/social"

    def test_non_image_src_skipped(self) -> None:
        soup = _soup('<header><img src="/track?id=1"></header>')
        assert derive_logo("Acme", PAGE, soup) == "https://logo.clearbit.com/acme.com"

    def test_clearbit_without_page(self) -> None:
        assert derive_logo("Acme", PAGE) == "https://logo.clearbit.com/acme.com"

    def test_favicon_last(self) -> None:
        assert derive_logo(None, "https://acme.com/jobs/1") == "https://acme.com/favicon.ico"


class TestFavicon:
    def test_link_element(self) -> None:
        soup = _soup('<link rel="icon" href="/fav.png">')
        assert favicon("https://acme.com/jobs/1", soup) == "https://acme.com/fav.png"

    def test_not_http(self) -> None:
        assert favicon("mailto:jobs@acme.com") is None


class TestIsImageUrl:
    def test_extension_and_host(self) -> None:
        assert is_image_url("https://acme.com/logo.PNG?v=2")
        assert is_image_url("https://static.acme.com/brand")
        assert not is_image_url("https://acme.com/about")
