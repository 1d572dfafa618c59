"""Common literal values used across src_press.

These constants keep file names, recognised repository files, and layout
defaults in one place so the planner, the configuration layer, and tests share
the same values.

Examples
--------
>>> from src_press import _constants
>>> _constants.CONFIG_FILENAME
'src-press.toml'
>>> _constants.PAGE_SIZES["a5"]
(5.83, 8.27)
"""

CONFIG_FILENAME = "src-press.toml"
TOOL_NAME = "src-press"
TOOL_VERSION = "0.1.0"

TAB_WIDTH = 4
POINTS_PER_INCH = 72.0
LINE_HEIGHT_FACTOR = 1.2
FILE_HEADING_ROWS = 2
DEFAULT_MAX_OFFENSES_PER_FILE = 20

HISTOGRAM_COLUMNS = 60
HISTOGRAM_BAR_HEIGHT = 8
LANGUAGE_STATS_LIMIT = 10
BINARY_SNIFF_BYTES = 8192

DEFAULT_CHAR_WIDTH_EM = 0.6
FONT_CHAR_WIDTHS_EM: dict[str, float] = {
    "sourcecodepro": 0.6,
    "firamono": 0.6,
    "firacode": 0.6,
    "jetbrainsmono": 0.6,
    "ibmplexmono": 0.6,
    "courier": 0.6,
    "dejavusansmono": 0.6,
    "menlo": 0.6,
    "inconsolata": 0.5,
}

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "half-letter": (5.5, 8.5),
    "a5": (5.83, 8.27),
    "a6": (4.13, 5.83),
    "quarter-letter": (4.25, 5.5),
}

ENTRYPOINT_CANDIDATES: tuple[str, ...] = (
    "src/main.rs",
    "src/lib.rs",
    "__main__.py",
    "main.py",
    "src/__main__.py",
    "src/index.ts",
    "src/index.js",
    "index.ts",
    "index.js",
    "main.go",
    "cmd/main.go",
)

# Upper-cased stems of root-level documents, in frontmatter priority order.
FRONTMATTER_DOCUMENT_GROUPS: tuple[tuple[str, ...], ...] = (
    ("README",),
    ("ARCHITECTURE", "DESIGN"),
    ("CONTRIBUTING",),
    ("CHANGELOG", "HISTORY"),
    ("CODE_OF_CONDUCT",),
    ("SECURITY",),
)
# Extensions a document or licence may carry, most preferred first.
FRONTMATTER_TEXT_SUFFIXES: tuple[str, ...] = (".md", "", ".txt", ".rst", ".markdown")
# Lower-cased manifest names; each inner tuple proposes at most one file.
MANIFEST_GROUPS: tuple[tuple[str, ...], ...] = (
    ("cargo.toml",),
    ("package.json",),
    ("pyproject.toml", "setup.py"),
    ("go.mod",),
    ("makefile",),
)
LICENCE_STEMS: tuple[str, ...] = ("LICENSE", "LICENCE", "COPYING")
AUTHORS_FILENAMES: tuple[str, ...] = ("AUTHORS", "AUTHORS.txt", "AUTHORS.md")
BINARY_LANGUAGE_LABEL = "Binary"
BINARY_PLACEHOLDER = "<binary data>"

DEFAULT_TITLE_TEMPLATE = "{title}\n\n{authors}\n\n{licences}\n\n{date}"
DEFAULT_COVER_TEMPLATE = "{title}\n\n- by -\n\n{authors}"
DEFAULT_HEADER_TEMPLATE = "{file}"
DEFAULT_FOOTER_TEMPLATE = "{n}"
DEFAULT_COLOPHON_TEMPLATE = """\
{title}

Generated on {generated_date} by {tool_version}

Authors: {authors}
Licences: {licences}

Repository
{remotes}

Statistics
  Files:    {file_count}
  Lines:    {line_count}
  Size:     {total_bytes}
  Commits:  {commit_count}

Languages
{language_stats}

Commit Activity ({date_range})
{commit_chart}
"""
