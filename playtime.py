"""Ranking and formatting of Steam playtime into fixed-width display lines."""

from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from wcwidth import wcswidth, wcwidth

from steam_api import GameRecord

TOP_N = 10
NAME_WIDTH = 35  # display columns
MULTILINE_INDENT = " " * 8

# Single-line mode alternates these by rank parity
CLOCK_ICONS = ("⌚", "⏱️")

UNKNOWN_GAME = "Unknown Game"
UNKNOWN_ICON = "❓ "
DEFAULT_ICON = "✨ "


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

ICONS: Mapping[int, str] = MappingProxyType({
    70: "λ ",           # Half-Life
    220: "λ² ",         # Half-Life 2
    500: "🧟 ",         # Left 4 Dead
    550: "🧟 ",         # Left 4 Dead 2
    570: "⚔️ ",         # Dota 2
    730: "🔫 ",         # CS:GO
    8930: "🌏 ",        # Sid Meier's Civilization V
    252950: "🚀 ",      # Rocket League
    269950: "✈️ ",      # X-Plane 11
    271590: "🚓 ",      # GTA 5
    359550: "🔫 ",      # Tom Clancy's Rainbow Six Siege
    431960: "💻 ",      # Wallpaper Engine
    578080: "🍳 ",      # PUBG
    945360: "🕵️‍♂️ ",      # Among Us
    1250410: "🛩️ ",     # Microsoft Flight Simulator
    1091500: "🦾 ",     # Cyberpunk 2077
    594650: "🎯 ",      # Hunt: Showdown
    230410: "🐹 ",      # Warframe
    397540: "🤖 ",      # Borderlands 3
    49520: "🤖 ",       # Borderlands 2
    440: "🎯 ",         # Team Fortress 2
    1973530: "🚌 ",     # Limbus Company
    1454400: "🍪 ",     # Cookie Clicker
    2420510: "🎤 ",     # HoloCure - Save the Fans!
    459820: "💖 ",      # Crush Crush
    629520: "🎶 ",      # Soundpad
    368340: "⚔️ ",      # CrossCode
    588650: "🗡️ ",      # Dead Cells
    1145360: "🔥 ",     # Hades
    1229490: "💣 ",     # ULTRAKILL
    2835570: "🎯 ",     # Buckshot Roulette
    247080: "💀 ",      # Crypt of the NecroDancer
    400040: "📸 ",      # ShareX
    1677740: "🤪 ",     # Stumble Guys
    250900: "👶 ",      # The Binding of Isaac: Rebirth
    1313140: "🐑 ",     # Cult of the Lamb
    1388880: "📚 ",     # Doki Doki Literature Club Plus!
    311690: "🔫 ",      # Enter the Gungeon
    1229380: "🎹 ",     # Everhood
    367520: "🦇 ",      # Hollow Knight
    1061090: "👑 ",     # Jump King
    1256670: "📖 ",     # Library Of Ruina
    3590: "🌻 ",        # Plants vs. Zombies GOTY Edition
    620: "🌀 ",         # Portal 2
    646570: "🃏 ",      # Slay the Spire
    413150: "🌾 ",      # Stardew Valley
    105600: "🌍 ",      # Terraria
    391540: "💔 ",      # Undertale
    1794680: "🧛 ",     # Vampire Survivors
    2726450: "🔪 ",     # Windowkill
})


def resolve_icon(app_id: int, name: str, table: Mapping[int, str] = ICONS) -> str:
    """Prefix *name* with the game's icon, or a fallback icon."""
    icon = table.get(app_id)
    if icon is not None:
        return icon + name
    if name == UNKNOWN_GAME:
        return UNKNOWN_ICON + name
    return DEFAULT_ICON + name


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def filter_games(games: Iterable[GameRecord], app_ids: Iterable[int] = ()) -> list[GameRecord]:
    """Keep only games in the allow-list. An empty allow-list keeps everything."""
    allowed = set(app_ids)
    if not allowed:
        return list(games)
    return [g for g in games if g.app_id in allowed]


def rank_games(games: Iterable[GameRecord], limit: int = TOP_N) -> list[GameRecord]:
    """Top *limit* games by total playtime. Ties keep their input order."""
    ranked = sorted(games, key=lambda g: g.playtime_minutes, reverse=True)
    return ranked[:limit]


def normalize_names(games: Iterable[GameRecord]) -> list[GameRecord]:
    """Replace empty names with the Unknown Game sentinel."""
    return [g if g.name else GameRecord(g.app_id, UNKNOWN_GAME, g.playtime_minutes,
                                        g.playtime_2weeks)
            for g in games]


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def display_width(s: str) -> int:
    """Rendered width of *s* in terminal columns."""
    width = wcswidth(s)
    if width >= 0:
        return width
    # wcswidth gives up on control characters; count the printable ones
    return sum(max(wcwidth(ch), 0) for ch in s)


def pad(s: str, target: int, fill: str = " ") -> str:
    """Right-pad *s* to *target* display columns. Never clips."""
    padding = target - display_width(s)
    if padding <= 0:
        return s
    return s + fill * padding


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours} hrs {mins} mins"


def format_lines(games: Sequence[GameRecord], multi_line: bool = False,
                 icons: Mapping[int, str] = ICONS) -> list[str]:
    """Render ranked games as display lines.

    Single-line mode gives one padded line per game with a clock icon that
    alternates by rank. Multi-line mode gives the name line followed by an
    indented time line.
    """
    lines = []
    for rank, game in enumerate(games):
        name = resolve_icon(game.app_id, game.name, icons)
        duration = format_duration(game.playtime_minutes)
        if multi_line:
            lines.append(name)
            lines.append(f"{MULTILINE_INDENT}{CLOCK_ICONS[0]} {duration}")
        else:
            clock = CLOCK_ICONS[rank % 2]
            lines.append(f"{pad(name, NAME_WIDTH)} {clock} {duration}")
    return lines


# ---------------------------------------------------------------------------
# Per-flow pipelines
# ---------------------------------------------------------------------------

def playtime_lines(games: Iterable[GameRecord], multi_line: bool = False,
                   app_ids: Iterable[int] = ()) -> list[str]:
    """All-time most played games.

    Empty names are left as they are here, unlike recent_lines().
    """
    return format_lines(rank_games(filter_games(games, app_ids)), multi_line)


def recent_lines(games: Iterable[GameRecord], multi_line: bool = False) -> list[str]:
    """Recently played games, ranked the same way as all-time playtime."""
    return format_lines(rank_games(normalize_names(games)), multi_line)
