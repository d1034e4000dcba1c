from bs4 import BeautifulSoup, Comment, Tag

# Tags whose text never reaches the reader
_INVISIBLE_TAGS = {
    "script",
    "style",
    "noscript",
    "template",
    "svg",
    "canvas",
    "head",
}

# Block-level containers counted as paragraphs when they hold text
PARAGRAPH_TAGS = ("p", "li", "blockquote", "pre")


def parse(html: str) -> BeautifulSoup:
    """Parse *html* with lxml; empty or non-HTML input yields an empty tree."""
    return BeautifulSoup(html or "", "lxml")


def visible_tree(html: str) -> BeautifulSoup:
    """Return a tree containing only reader-visible content.

    Script, style and other non-rendered subtrees are removed together with
    HTML comments, so ``get_text()`` on the result yields what a visitor
    actually reads.
    """
    soup = parse(html)

    for tag in soup.find_all(_INVISIBLE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    return soup


def visible_text(soup: BeautifulSoup) -> str:
    """Whitespace-collapsed text of *soup*."""
    root = soup.body or soup
    return " ".join(root.get_text(separator=" ").split())


def count_paragraphs(soup: BeautifulSoup) -> int:
    count = 0
    for tag in soup.find_all(PARAGRAPH_TAGS):
        if isinstance(tag, Tag) and tag.get_text(strip=True):
            count += 1
    return count
