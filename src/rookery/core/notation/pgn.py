"""PGN parsing and serialization helpers."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date

from rookery.core.config import DEFAULT_SETTINGS, EngineSettings
from rookery.core.enums import GameResult
from rookery.core.errors import PgnError
from rookery.core.notation.models import ParsedPgn, PgnMove

_LOGGER = logging.getLogger(__name__)

_PGN_HEADER_RE = re.compile(r'^\[(\w+)\s+"((?:[^"\\]|\\.)*)"\]\s*$')
_PGN_RESULT_TOKENS = {"1-0", "0-1", "1/2-1/2", "*"}
_MOVE_NUMBER_RE = re.compile(r"^\d+\.(?:\.\.)?$")
# "12.e4" / "12...e5": a move number glued to the move.
_GLUED_NUMBER_RE = re.compile(r"^\d+\.+")

SEVEN_TAG_ROSTER: tuple[str, ...] = (
    "Event",
    "Site",
    "Date",
    "Round",
    "White",
    "Black",
    "Result",
)


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    if result == GameResult.WHITE_WINS:
        return "1-0"
    if result == GameResult.BLACK_WINS:
        return "0-1"
    if result == GameResult.DRAW:
        return "1/2-1/2"
    return "*"


def game_result_from_pgn(token: str) -> GameResult:
    """Convert PGN result token to :class:`GameResult`."""
    if token == "1-0":
        return GameResult.WHITE_WINS
    if token == "0-1":
        return GameResult.BLACK_WINS
    if token == "1/2-1/2":
        return GameResult.DRAW
    return GameResult.IN_PROGRESS


# ── Generation ───────────────────────────────────────────────────────────────


def default_headers(
    settings: EngineSettings = DEFAULT_SETTINGS, today: date | None = None
) -> dict[str, str]:
    """Seven Tag Roster defaults, in roster order."""
    day = today or date.today()
    return {
        "Event": settings.event_name,
        "Site": settings.site_name,
        "Date": day.strftime("%Y.%m.%d"),
        "Round": "1",
        "White": settings.white_name,
        "Black": settings.black_name,
        "Result": "*",
    }


def pgn_movetext_from_sans(
    sans: Sequence[str], result_token: str, plies_per_line: int = 0
) -> str:
    """Build PGN movetext from SAN moves and a result token."""
    return pgn_movetext_from_moves(
        [PgnMove(san=san) for san in sans], result_token, plies_per_line
    )


def pgn_movetext_from_moves(
    moves: Sequence[PgnMove], result_token: str, plies_per_line: int = 0
) -> str:
    """Build PGN movetext from mainline moves with optional comments.

    With *plies_per_line* > 0 a line break follows every that many plies.
    """
    lines: list[str] = []
    parts: list[str] = []
    for ply, move in enumerate(moves):
        if ply % 2 == 0:
            parts.append(f"{(ply // 2) + 1}.")
        parts.append(move.san)
        if move.comment:
            # PGN comments cannot contain a closing brace.
            safe_comment = move.comment.replace("}", "]")
            parts.append(f"{{{safe_comment}}}")
        if plies_per_line and (ply + 1) % plies_per_line == 0:
            lines.append(" ".join(parts))
            parts = []
    parts.append(result_token)
    lines.append(" ".join(parts))
    return "\n".join(lines)


def build_pgn(
    headers: Mapping[str, str] | None,
    sans: Sequence[str],
    result_token: str | None = None,
    comments: Sequence[str | None] | None = None,
    *,
    settings: EngineSettings = DEFAULT_SETTINGS,
    today: date | None = None,
) -> str:
    """Build a single-game PGN document.

    Header order is the Seven Tag Roster (defaults from *settings*, overridden
    by *headers*), then any extra caller tags in their given order. The result
    token defaults to the ``Result`` header.
    """
    if comments is not None and len(comments) != len(sans):
        raise ValueError("PGN comments length must match SAN move length")

    merged = default_headers(settings, today)
    merged.update(headers or {})
    if result_token is None:
        result_token = merged["Result"]
    if result_token not in _PGN_RESULT_TOKENS:
        raise PgnError(f"Invalid PGN result token: {result_token!r}")
    merged["Result"] = result_token

    moves: list[PgnMove] = []
    for idx, san in enumerate(sans):
        comment = ""
        if comments is not None and comments[idx]:
            comment = comments[idx] or ""
        moves.append(PgnMove(san=san, comment=comment))

    lines: list[str] = []
    for key, value in merged.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    lines.append("")
    lines.append(
        pgn_movetext_from_moves(moves, result_token, settings.pgn_plies_per_line)
    )
    lines.append("")
    return "\n".join(lines)


# ── Parsing ──────────────────────────────────────────────────────────────────


def _append_comment(move: PgnMove, comment: str) -> None:
    clean = " ".join(comment.split())
    if not clean:
        return
    if move.comment:
        move.comment = f"{move.comment} {clean}"
    else:
        move.comment = clean


def _parse_pgn_movetext_mainline(movetext: str) -> tuple[list[PgnMove], str | None]:
    """Parse movetext and return mainline moves/comments plus result token."""
    moves: list[PgnMove] = []
    result_token: str | None = None
    variation_depth = 0
    idx = 0
    total = len(movetext)

    while idx < total:
        ch = movetext[idx]

        if ch.isspace():
            idx += 1
            continue

        if ch == "{":
            end = movetext.find("}", idx + 1)
            if end < 0:
                comment = movetext[idx + 1 :]
                idx = total
            else:
                comment = movetext[idx + 1 : end]
                idx = end + 1
            if variation_depth == 0 and moves:
                _append_comment(moves[-1], comment)
            continue

        if ch == ";":
            end = movetext.find("\n", idx + 1)
            if end < 0:
                end = total
            comment = movetext[idx + 1 : end]
            if variation_depth == 0 and moves:
                _append_comment(moves[-1], comment)
            idx = end
            continue

        if ch == "(":
            variation_depth += 1
            idx += 1
            continue

        if ch == ")":
            variation_depth = max(0, variation_depth - 1)
            idx += 1
            continue

        token_end = idx
        while (
            token_end < total
            and not movetext[token_end].isspace()
            and movetext[token_end] not in "{};()"
        ):
            token_end += 1
        token = movetext[idx:token_end]
        idx = token_end

        if not token or variation_depth > 0:
            continue

        if token in _PGN_RESULT_TOKENS:
            result_token = token
            continue

        if _MOVE_NUMBER_RE.match(token):
            continue

        if token.startswith("$") and token[1:].isdigit():
            continue

        token = _GLUED_NUMBER_RE.sub("", token).lstrip(".")
        if not token:
            continue

        moves.append(PgnMove(san=token))

    return moves, result_token


def parse_pgn_game(pgn_text: str) -> ParsedPgn:
    """Parse a single PGN game into structured headers/moves/result.

    Only the mainline is kept: variations and NAGs are skipped, comments are
    attached to the move they follow.
    """
    headers: dict[str, str] = {}
    move_lines: list[str] = []
    in_headers = True

    for raw_line in pgn_text.splitlines():
        line = raw_line.strip()
        if not line:
            if in_headers and not headers:
                continue
            in_headers = False
            continue

        if in_headers and line.startswith("["):
            match = _PGN_HEADER_RE.match(line)
            if match is None:
                raise PgnError(f"Invalid PGN header line: {line}")
            key, raw_value = match.groups()
            value = raw_value.replace('\\"', '"').replace("\\\\", "\\")
            headers[key] = value
            continue

        in_headers = False
        if line.startswith("%"):
            continue
        move_lines.append(line)

    moves, result_token = _parse_pgn_movetext_mainline("\n".join(move_lines))
    if not headers and not moves and result_token is None:
        raise PgnError("PGN text has neither headers nor movetext")

    if result_token is None:
        header_result = headers.get("Result")
        result_token = header_result if header_result in _PGN_RESULT_TOKENS else "*"

    _LOGGER.debug("Parsed PGN: %d headers, %d moves", len(headers), len(moves))
    return ParsedPgn(headers=headers, moves=moves, result_token=result_token)


def parse_pgn(pgn_text: str) -> tuple[dict[str, str], list[str], str]:
    """Headers + SAN mainline + result token."""
    parsed = parse_pgn_game(pgn_text)
    return parsed.headers, parsed.sans, parsed.result_token
