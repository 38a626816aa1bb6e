"""App market and code grid actions available once the first quarter starts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.apps import MAX_STARS, get_app_card
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.state import COMMIT_CODE_POWER, PublishedApp
from tycoon_backend.shared.enums import CorporationStyle

if TYPE_CHECKING:
    from tycoon_backend.game_logic.grid import LineDirection
    from tycoon_backend.game_logic.state import GameState

SAME_COLOR_RUN = 3
MIXED_COLOR_RUN = 4
COMMIT_MONEY = 1


def _grid_open(state: GameState) -> bool:
    return state.current_round >= 1 and state.phase is not GamePhase.GAME_END


def claim_app_card(state: GameState, player_id: str, card_id: str) -> GameState:
    """Take a card from the market into hand and refill the market from the deck."""
    get_app_card(card_id)
    if not _grid_open(state):
        return state
    player = state.player(player_id)
    market = state.round_state.app_market
    if card_id not in market:
        return state
    if len(player.held_app_cards) >= state.configuration.app_hand_limit:
        return state
    market = tuple(card for card in market if card != card_id)
    deck = state.app_deck
    if deck:
        market = (*market, deck[0])
        deck = deck[1:]
    player = player.model_copy(update={"held_app_cards": (*player.held_app_cards, card_id)})
    state = state.replace_player(player).model_copy(update={"app_deck": deck})
    state = state.with_round_state(app_market=market)
    return state.record("app-claimed", player_id=player_id, card_id=card_id)


def publish_app(
    state: GameState, player_id: str, card_id: str, row: int, col: int
) -> GameState:
    """Ship a held app using the grid tokens that match its pattern at (row, col)."""
    card = get_app_card(card_id)
    if not _grid_open(state):
        return state
    player = state.player(player_id)
    if card_id not in player.held_app_cards:
        return state
    grid = player.code_grid
    height, width = len(card.pattern), len(card.pattern[0])
    if not (grid.in_bounds(row, col) and grid.in_bounds(row + height - 1, col + width - 1)):
        return state
    matched = grid.match_pattern(card.pattern, row, col)
    if matched == 0:
        return state
    stars = card.star_rating(matched)
    bonus_used = 0
    if player.corporation_style is CorporationStyle.AGENCY and player.marketing_star_bonus:
        bonus_used = player.marketing_star_bonus
        stars = min(MAX_STARS, stars + bonus_used)
    vp = card.vp_for(stars)
    money = card.money_for(stars)
    app = PublishedApp(
        card_id=card_id,
        stars=stars,
        vp_earned=vp,
        money_earned=money,
        round_published=state.current_round,
    )
    hand = list(player.held_app_cards)
    hand.remove(card_id)
    player = player.model_copy(
        update={
            "code_grid": grid.clear_pattern(card.pattern, row, col),
            "held_app_cards": tuple(hand),
            "published_apps": (*player.published_apps, app),
            "marketing_star_bonus": player.marketing_star_bonus - bonus_used,
        }
    ).adjust_resources(money=money)
    state = state.replace_player(player)
    return state.record(
        "app-published",
        card.name,
        player_id=player_id,
        card_id=card_id,
        stars=stars,
        vp=vp,
        money=money,
    )


def commit_code(
    state: GameState,
    player_id: str,
    row: int,
    col: int,
    direction: LineDirection = "row",
    length: int = SAME_COLOR_RUN,
) -> GameState:
    """Commit grid tokens once per round.

    Agencies commit a single token at (row, col). Product companies commit a
    run starting there: three tokens of one colour or four of different colours.
    """
    if not _grid_open(state):
        return state
    player = state.player(player_id)
    if player.round_powers.has_used(COMMIT_CODE_POWER):
        return state
    grid = player.code_grid
    if player.corporation_style is CorporationStyle.AGENCY:
        grid, removed = grid.remove(row, col)
        if removed is None:
            return state
        player = player.model_copy(update={"code_grid": grid})
    else:
        if length not in {SAME_COLOR_RUN, MIXED_COLOR_RUN}:
            return state
        positions = grid.line(row, col, direction, length)
        if positions is None:
            return state
        colors = [grid.cell(*pos) for pos in positions]
        if any(color is None for color in colors):
            return state
        distinct = len(set(colors))
        if (length == SAME_COLOR_RUN and distinct != 1) or (
            length == MIXED_COLOR_RUN and distinct != MIXED_COLOR_RUN
        ):
            return state
        player = player.model_copy(
            update={
                "code_grid": grid.clear(positions),
                "committed_code_count": player.committed_code_count + 1,
            }
        )
        player = player.adjust_resources(money=COMMIT_MONEY).advance_production(
            state.configuration, mau=1
        )
    player = player.model_copy(
        update={"round_powers": player.round_powers.mark(COMMIT_CODE_POWER)}
    )
    state = state.replace_player(player)
    return state.record("code-committed", player_id=player_id, row=row, col=col)


__all__ = [
    "claim_app_card",
    "commit_code",
    "publish_app",
]
