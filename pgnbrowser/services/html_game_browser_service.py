"""Service producing a self-contained HTML page to browse a game move by move."""

import html
import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import chess.pgn

from pgnbrowser.models.navigation_index import NUM_OF_SQUARES, NavigationIndex, PlyRecord
from pgnbrowser.services.game_traversal_service import GameTraversalService
from pgnbrowser.services.logging_service import LoggingService
from pgnbrowser.services.pgn_service import PgnService
from pgnbrowser.services.position_snapshot import (
    MIN_STONE,
    NUM_OF_STONES,
    is_white_square,
    offset_stone,
)


DEFAULT_WHITE_SQUARE_IMAGES = [
    "bkw.gif", "bqw.gif", "brw.gif", "bbw.gif", "bnw.gif", "bpw.gif", "now.gif",
    "wpw.gif", "wnw.gif", "wbw.gif", "wrw.gif", "wqw.gif", "wkw.gif",
]
DEFAULT_BLACK_SQUARE_IMAGES = [
    "bkb.gif", "bqb.gif", "brb.gif", "bbb.gif", "bnb.gif", "bpb.gif", "nob.gif",
    "wpb.gif", "wnb.gif", "wbb.gif", "wrb.gif", "wqb.gif", "wkb.gif",
]

INLINE_STYLE = """<style type="text/css">
   .main {text-decoration:none}
   .line {text-decoration:none}
  a.main {font-weight:bold; color:black}
  a.line {color:black}
  table.content {border-spacing:20px}
  span.comment {font-style:italic}
</style>"""

# Viewer script; the navigation rules mirror NavigationIndex.go_to/go_backward/go_forward
VIEWER_SCRIPT = """  PgnBrowser.prototype.go = function (num) {
    var anchor = document.getElementById("ply-" + this.moveNumber);
    if (anchor) {anchor.style.background = "white"; anchor.style.color = "black";}
    if (num < 0) this.moveNumber = 0;
    else if (num > this.count - 1) this.moveNumber = this.count - 1;
    else this.moveNumber = num;
    var images = document.getElementById("board").getElementsByTagName("img");
    for (var i = 0; i < 64; i++) {
      var offset = (Math.floor(i / 8) % 2) == (i % 2) ? 0 : this.imgs.length / 2;
      images[i].src = this.imgs[this.sq[this.moveNumber][i] + offset];
    }
    anchor = document.getElementById("ply-" + this.moveNumber);
    if (anchor) {anchor.style.background = "black"; anchor.style.color = "white";}
  };
  PgnBrowser.prototype.gotoStart = function () {this.go(0);};
  PgnBrowser.prototype.goBackward = function () {this.go(this.last[this.moveNumber]);};
  PgnBrowser.prototype.goForward = function () {
    for (var i = this.count - 1; i > this.moveNumber; i--) {
      if (this.last[i] == this.moveNumber) {this.go(i); break;}
    }
  };
  PgnBrowser.prototype.gotoEnd = function () {this.go(this.count - 1);};
var pgnbrowser = new PgnBrowser();"""


class HtmlGameBrowserService:
    """Producer for HTML pages displaying a game.

    The page holds the board of the start position, a tape control (start,
    back, forward, end) and the move list. Every move is a link; clicking it
    or using the tape control swaps the board images to the snapshot stored
    for that ply.

    When an external style file is used, the following styles are expected:
    - a.main: the anchor used for moves in the main line
    - a.line: the anchor used for moves in side lines
    - span.comment: used for move comments
    - table.content: the table containing the board on the left and the moves on the right
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the service.

        Args:
            config: Configuration dictionary; settings are read from its 'browser' section.
        """
        self.config = config or {}
        browser_config = self.config.get('browser', {})

        self._image_prefix: str = browser_config.get('image_prefix', "")
        self._style_filename: Optional[str] = browser_config.get('style_filename')
        self._title_in_moves: bool = browser_config.get('title_in_moves', True)
        self._with_lines: bool = browser_config.get('with_lines', True)
        self._white_images: List[str] = list(
            browser_config.get('white_square_images', DEFAULT_WHITE_SQUARE_IMAGES)
        )
        self._black_images: List[str] = list(
            browser_config.get('black_square_images', DEFAULT_BLACK_SQUARE_IMAGES)
        )
        if len(self._white_images) != NUM_OF_STONES or len(self._black_images) != NUM_OF_STONES:
            raise ValueError(f"Square image tables must hold {NUM_OF_STONES} names each")

        self._render_lock = threading.Lock()
        self._logger = LoggingService.get_instance()

    # ------------------------------------------------------------------
    # Settings

    def set_style_filename(self, style_filename: Optional[str]) -> None:
        """Set the name of the style file. None means an inline style definition is used."""
        self._style_filename = style_filename

    def set_image_prefix(self, image_prefix: str) -> None:
        """Set the prefix for images, including any trailing slash."""
        self._image_prefix = image_prefix

    def set_stone_image_name(self, stone: int, white_square: bool, name: str) -> None:
        """Set the image name for a stone on a square colour.

        Args:
            stone: Signed stone, -6 (black king) .. 6 (white king), 0 for an empty square.
            white_square: Whether the image is for light squares.
            name: Image file name, without the prefix.
        """
        images = self._white_images if white_square else self._black_images
        images[offset_stone(stone)] = name

    def get_image_for_stone(self, stone: int, white_square: bool) -> str:
        """Get the prefixed image name for a signed stone on a square colour."""
        images = self._white_images if white_square else self._black_images
        return self._image_prefix + images[offset_stone(stone)]

    # ------------------------------------------------------------------
    # Output

    def produce_html(self, game: chess.pgn.Game, content_only: bool = False) -> str:
        """Produce HTML to display a game.

        Args:
            game: Parsed game.
            content_only: If True skip the document head and body wrapper, for
                embedding into a page with its own header and footer.

        Returns:
            The HTML text.
        """
        # One render at a time: the listener state belongs to a single traversal
        with self._render_lock:
            index = GameTraversalService.build_index(game, with_lines=self._with_lines)
            title = PgnService.game_title(game)
            result = game.headers.get("Result", "*")
            self._logger.debug(f"Rendering '{title}' with {index.count} plies")
            return self.render_index(index, title, result, content_only)

    def write_html(self, path: Union[str, Path], game: chess.pgn.Game, content_only: bool = False) -> Path:
        """Produce HTML for a game and write it to a UTF-8 file.

        Returns:
            The path written.
        """
        path = Path(path)
        path.write_text(self.produce_html(game, content_only), encoding='utf-8')
        self._logger.info(f"HTML written to {path}")
        return path

    def render_index(
        self,
        index: NavigationIndex,
        title: str,
        result: str = "*",
        content_only: bool = False,
    ) -> str:
        """Render a sealed navigation index to HTML.

        Args:
            index: Sealed navigation index.
            title: Game title, escaped here.
            result: Result token appended after the moves.
            content_only: If True skip the document head and body wrapper.

        Returns:
            The HTML text.
        """
        if not index.sealed:
            raise RuntimeError("Only a sealed navigation index can be rendered")

        lines: List[str] = []
        if not content_only:
            lines.append("<!doctype html>")
            lines.append("<html>")
            lines.append("<head>")
            lines.append('<meta charset="utf-8" />')
            lines.append('<meta name="generator" content="PgnBrowser" />')
            lines.append(f"<title>{html.escape(title)}</title>")
            if self._style_filename is None:
                lines.append(INLINE_STYLE)
            else:
                lines.append(
                    f'<link rel="stylesheet" href="{html.escape(self._style_filename, quote=True)}" type="text/css" />'
                )
            lines.append(self._render_script(index))
            lines.append("</head>")
            lines.append("")
            lines.append("<body>")
        else:
            lines.append(self._render_script(index))

        lines.append('<table class="content"><thead></thead><tbody><tr><td valign="top">')
        lines.append(self._render_board(index))
        lines.append(self._render_tape_control())
        lines.append("")
        lines.append('</td><td valign="top">')
        lines.append(self._render_moves(index, title, result))
        lines.append("</td></tr></tbody></table>")

        if not content_only:
            lines.append("</body></html>")

        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Page parts

    def _render_script(self, index: NavigationIndex) -> str:
        """Script holding the image table, the snapshot table and the back-pointer table."""
        images = [self._image_prefix + name for name in self._white_images]
        images += [self._image_prefix + name for name in self._black_images]
        tables = index.to_dict()

        parts = [
            "<script>",
            "var PgnBrowser = function() {",
            "  this.moveNumber = 0;",
            f"  this.count = {tables['count']};",
            f"  this.imgs = {self._js_literal(images)};",
            f"  this.sq = {json.dumps(tables['snapshots'], separators=(',', ':'))};",
            f"  this.last = {json.dumps(tables['back_pointers'], separators=(',', ':'))};",
            "};",
            VIEWER_SCRIPT,
            "</script>",
        ]
        return "\n".join(parts)

    @staticmethod
    def _js_literal(value: Any) -> str:
        """JSON literal that is safe inside a script element."""
        return json.dumps(value).replace("</", "<\\/")

    def _render_board(self, index: NavigationIndex) -> str:
        """Board table, drawn from the start position."""
        snapshot = index.snapshot_at(0)

        lines = ['<table id="board" cellspacing="0" cellpadding="0"><thead></thead><tbody>']
        for row_start in range(0, NUM_OF_SQUARES, 8):
            cells = []
            for square_index in range(row_start, row_start + 8):
                stone = snapshot.stone_at(square_index) + MIN_STONE
                src = self.get_image_for_stone(stone, is_white_square(square_index))
                cells.append(f'<td><img src="{html.escape(src, quote=True)}"></td>')
            lines.append("  <tr>" + "".join(cells) + "</tr>")
        lines.append("</tbody>")
        lines.append("</table>")
        return "\n".join(lines)

    @staticmethod
    def _render_tape_control() -> str:
        """Start / back / forward / end buttons."""
        buttons = [
            (" Start ", "pgnbrowser.gotoStart();"),
            (" &lt; ", "pgnbrowser.goBackward();"),
            (" &gt; ", "pgnbrowser.goForward();"),
            (" End ", "pgnbrowser.gotoEnd();"),
        ]
        lines = ['<center><form name="tapecontrol">']
        for label, action in buttons:
            lines.append(f'<input type=button value="{label}" onClick="{action}" onDblClick="{action}">')
        lines.append("</form></center>")
        return "\n".join(lines)

    def _render_moves(self, index: NavigationIndex, title: str, result: str) -> str:
        """Move list with one link per ply, side lines in parentheses."""
        parts: List[str] = []
        if self._title_in_moves:
            parts.append(f"<h4>{html.escape(title)}</h4>")

        for ply in index.plies[1:]:
            parts.append(" (" * ply.variations_opened)
            parts.append(self._render_ply(ply))
            parts.append(") " * ply.variations_closed)

        parts.append(" " + html.escape(result))
        return "".join(parts)

    @staticmethod
    def _render_ply(ply: PlyRecord) -> str:
        """Anchor for one ply, followed by its comment."""
        css_class = "main" if ply.is_main_line else "line"
        text = []
        if ply.show_move_number:
            text.append(f"{ply.move_number}." if ply.is_white else f"{ply.move_number}...")
        text.append(html.escape(ply.move_text))
        text.extend(html.escape(tag) for tag in ply.annotation_tags)

        anchor = (
            f'<a name="{ply.index}" id="ply-{ply.index}" class="{css_class}" '
            f'href="javascript:pgnbrowser.go({ply.index})">{"".join(text)}</a> '
        )
        if ply.comment:
            anchor += f'<span class="comment">{html.escape(ply.comment)}</span> '
        return anchor
