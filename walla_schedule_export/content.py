"""
Read access to the rendered widget frame.

The extraction engine never drives a browser. Whoever loads the widget,
navigates to the wanted day and waits for it to render hands the frame over
through one of these adapters:

- HtmlContent:     the frame's serialised HTML (e.g. saved from the browser
                   or ``driver.page_source`` taken inside the iframe)
- TextContent:     only the frame's visible text (document.body.innerText)
- SeleniumContent: a live selenium WebDriver already switched into the
                   widget iframe; only read calls are made on it
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag  # type: ignore[import]
from selenium.common.exceptions import StaleElementReferenceException, WebDriverException
from selenium.webdriver.common.by import By


class ContentUnavailableError(RuntimeError):
    """The content provider could not deliver the frame at all."""


class ContentProvider(Protocol):
    def visible_text(self) -> str: ...

    def navigation_url(self) -> str: ...

    def select(self, selectors: Sequence[str], root: Any = None) -> List[Any]: ...

    def matches(self, element: Any, selectors: Sequence[str]) -> bool: ...

    def element_text(self, element: Any) -> str: ...

    def following_siblings(self, element: Any) -> List[Any]: ...

    def parent(self, element: Any) -> Any: ...


# ──────────────────────────────────────────────────────────────────
#  Saved / serialised HTML
# ──────────────────────────────────────────────────────────────────

# Elements whose boundaries start a new line in rendered text
_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "br", "button", "dd", "div",
    "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form",
    "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main", "nav",
    "ol", "p", "pre", "section", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr", "ul",
}
_SKIP_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
_WS_RE = re.compile(r"\s+")
_INVISIBLE_TAGS = ("script", "style", "noscript", "template", "head")


def _collect_text(node: Tag, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, _SKIP_STRINGS):
            continue
        if isinstance(child, NavigableString):
            parts.append(_WS_RE.sub(" ", str(child)))
            continue
        if not isinstance(child, Tag):
            continue
        # inline tags still separate words: <span>9:00 AM</span><span>Barre</span>
        edge = "\n" if child.name in _BLOCK_TAGS else " "
        parts.append(edge)
        _collect_text(child, parts)
        parts.append(edge)


def inner_text(node: Tag) -> str:
    """
    Approximate the browser's innerText: one line per block element, with
    inline elements kept apart by a space. Empty lines are dropped.
    """
    parts: List[str] = []
    _collect_text(node, parts)
    lines = (" ".join(line.split()) for line in "".join(parts).split("\n"))
    return "\n".join(line for line in lines if line)


class HtmlContent:
    """Content provider over the widget frame's HTML."""

    def __init__(self, html: str, url: str = ""):
        self.soup = BeautifulSoup(html or "", "html.parser")
        for tag in self.soup.find_all(_INVISIBLE_TAGS):
            tag.decompose()
        self.url = url or ""

    @classmethod
    def from_path(cls, html_path: str | Path, url: str = "") -> "HtmlContent":
        path = Path(html_path)
        try:
            html = path.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            raise ContentUnavailableError(f"Could not read frame HTML {path}: {e}") from e
        return cls(html, url=url)

    def visible_text(self) -> str:
        return inner_text(self.soup.body or self.soup)

    def navigation_url(self) -> str:
        return self.url

    def select(self, selectors: Sequence[str], root: Optional[Tag] = None) -> List[Tag]:
        scope = root if root is not None else self.soup
        return list(scope.select(", ".join(selectors)))

    def matches(self, element: Tag, selectors: Sequence[str]) -> bool:
        return bool(element.css.match(", ".join(selectors)))

    def element_text(self, element: Tag) -> str:
        return inner_text(element)

    def following_siblings(self, element: Tag) -> List[Tag]:
        return list(element.find_next_siblings())

    def parent(self, element: Tag) -> Optional[Tag]:
        parent = element.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return parent


class TextContent:
    """Content provider over flattened visible text only; there is no DOM."""

    def __init__(self, text: str, url: str = ""):
        self.text = text or ""
        self.url = url or ""

    @classmethod
    def from_path(cls, text_path: str | Path, url: str = "") -> "TextContent":
        path = Path(text_path)
        try:
            text = path.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            raise ContentUnavailableError(f"Could not read frame text {path}: {e}") from e
        return cls(text, url=url)

    def visible_text(self) -> str:
        return self.text

    def navigation_url(self) -> str:
        return self.url

    def select(self, selectors: Sequence[str], root: Any = None) -> List[Any]:
        return []

    def matches(self, element: Any, selectors: Sequence[str]) -> bool:
        return False

    def element_text(self, element: Any) -> str:
        return ""

    def following_siblings(self, element: Any) -> List[Any]:
        return []

    def parent(self, element: Any) -> Any:
        return None


# ──────────────────────────────────────────────────────────────────
#  Live selenium session
# ──────────────────────────────────────────────────────────────────

class SeleniumContent:
    """
    Content provider over a selenium WebDriver that the caller has already
    switched into the widget iframe (``driver.switch_to.frame(...)``).
    """

    def __init__(self, driver):
        self.driver = driver

    def _script(self, script: str, *args):
        try:
            return self.driver.execute_script(script, *args)
        except WebDriverException as e:
            raise ContentUnavailableError(f"Widget frame not readable: {e.msg or e}") from e

    def visible_text(self) -> str:
        return self._script("return document.body ? document.body.innerText : '';") or ""

    def navigation_url(self) -> str:
        # driver.current_url reports the top-level page, not the iframe
        return self._script("return window.location.href;") or ""

    def select(self, selectors: Sequence[str], root: Any = None) -> List[Any]:
        scope = root if root is not None else self.driver
        try:
            return list(scope.find_elements(By.CSS_SELECTOR, ", ".join(selectors)))
        except StaleElementReferenceException:
            return []
        except WebDriverException as e:
            raise ContentUnavailableError(f"Widget frame query failed: {e.msg or e}") from e

    def matches(self, element: Any, selectors: Sequence[str]) -> bool:
        try:
            return bool(self.driver.execute_script(
                "return arguments[0].matches(arguments[1]);", element, ", ".join(selectors)
            ))
        except StaleElementReferenceException:
            return False
        except WebDriverException as e:
            raise ContentUnavailableError(f"Widget frame query failed: {e.msg or e}") from e

    def element_text(self, element: Any) -> str:
        try:
            return (element.text or "").strip()
        except StaleElementReferenceException:
            return ""
        except WebDriverException as e:
            raise ContentUnavailableError(f"Widget frame not readable: {e.msg or e}") from e

    def following_siblings(self, element: Any) -> List[Any]:
        try:
            return list(element.find_elements(By.XPATH, "following-sibling::*"))
        except WebDriverException:
            return []

    def parent(self, element: Any) -> Any:
        try:
            if (element.tag_name or "").lower() in ("html", "body"):
                return None
            return element.find_element(By.XPATH, "..")
        except WebDriverException:
            return None
