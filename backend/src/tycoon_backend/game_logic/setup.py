"""Game creation, leader draft, corporation founding and corporation powers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.apps import create_app_deck, generate_code_pool
from tycoon_backend.game_logic.catalog.corporations import (
    PIVOT_POWER_ID,
    default_corporation_style,
    default_tech_for_leader,
    starting_metrics,
    starting_production,
    starting_resources,
)
from tycoon_backend.game_logic.catalog.events import create_event_deck
from tycoon_backend.game_logic.catalog.milestones import create_milestones
from tycoon_backend.game_logic.catalog.personas import PERSONA_CARDS, get_persona
from tycoon_backend.game_logic.catalog.themes import deal_themes
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.rounds import begin_round
from tycoon_backend.game_logic.state import GameState, Player, RoundState, Strategy
from tycoon_backend.shared.enums import (
    CorporationStyle,
    FundingType,
    ProductType,
    TechApproach,
)
from tycoon_backend.shared.value_objects import TechDebtBuffer

if TYPE_CHECKING:
    from tycoon_backend.game_logic.configuration import RulesConfiguration

PLAYER_COLORS: tuple[str, ...] = ("#3b82f6", "#ef4444", "#10b981", "#f59e0b")


def init_game(
    configuration: RulesConfiguration, player_count: int, seed: int
) -> GameState:
    """Create a game in the leader draft with decks shuffled and leaders dealt."""
    if not configuration.min_players <= player_count <= configuration.max_players:
        msg = (
            f"Player count must be between {configuration.min_players} and "
            f"{configuration.max_players}, got {player_count}."
        )
        raise ProgrammerError(msg)
    state = GameState(configuration=configuration, seed=seed)
    rng, state = state.draw_rng()

    players = tuple(
        Player(
            id=f"player-{index + 1}",
            name=f"Player {index + 1}",
            color=PLAYER_COLORS[index % len(PLAYER_COLORS)],
            seat=index,
            tech_debt_buffer=TechDebtBuffer(max_size=configuration.tech_debt_buffer_size),
        )
        for index in range(player_count)
    )
    persona_deck = list(rng.shuffle(card.id for card in PERSONA_CARDS))
    dealt: dict[str, tuple[str, ...]] = {}
    for player in players:
        hand = []
        for _ in range(configuration.leader_cards_per_player):
            if persona_deck:
                hand.append(persona_deck.pop())
        dealt[player.id] = tuple(hand)

    themes = deal_themes(rng)
    event_deck = create_event_deck(rng)
    app_deck = create_app_deck(rng)
    market_size = configuration.app_market_size
    code_pool = generate_code_pool(player_count, rng, configuration.tokens_per_player)

    state = state.model_copy(
        update={
            "phase": GamePhase.LEADER_DRAFT,
            "players": players,
            "persona_deck": tuple(persona_deck),
            "dealt_leader_cards": dealt,
            "themes": themes,
            "event_deck": event_deck,
            "app_deck": app_deck[market_size:],
            "milestones": create_milestones(),
            "round_state": RoundState(
                app_market=app_deck[:market_size], code_pool=code_pool
            ),
        }
    )
    return state.record("game-created", player_count=player_count, seed=seed)


def set_player_name(state: GameState, player_id: str, name: str) -> GameState:
    player = state.player(player_id)
    cleaned = name.strip()
    if not cleaned or cleaned == player.name:
        return state
    state = state.replace_player(player.model_copy(update={"name": cleaned}))
    return state.record("player-renamed", cleaned, player_id=player_id)


def select_leader(state: GameState, player_id: str, persona_id: str) -> GameState:
    """Choose one of the dealt leader cards; the rest return to the persona deck."""
    get_persona(persona_id)
    if state.phase is not GamePhase.LEADER_DRAFT:
        return state
    player = state.player(player_id)
    if player.leader_id is not None:
        return state
    if persona_id not in state.dealt_leader_cards.get(player_id, ()):
        return state
    state = state.replace_player(player.model_copy(update={"leader_id": persona_id}))
    state = state.record("leader-selected", player_id=player_id, persona_id=persona_id)
    if all(p.leader_id is not None for p in state.players):
        chosen = {p.leader_id for p in state.players}
        returned = tuple(
            card
            for hand in state.dealt_leader_cards.values()
            for card in hand
            if card not in chosen
        )
        state = state.model_copy(
            update={
                "persona_deck": (*returned, *state.persona_deck),
                "dealt_leader_cards": {},
                "phase": GamePhase.FUNDING_SELECTION,
            }
        )
    return state


def _found_corporation(
    player: Player,
    funding: FundingType,
    tech: TechApproach,
    product: ProductType,
    style: CorporationStyle,
    state: GameState,
) -> Player:
    resources = starting_resources(funding, tech)
    metrics = starting_metrics(product)
    production = starting_production(product)
    player = player.model_copy(
        update={
            "strategy": Strategy(funding=funding, tech=tech, product=product),
            "corporation_style": style,
            "resources": resources,
            "metrics": metrics,
            "production": production,
        }
    )
    if player.leader_id is None:
        return player
    bonus = get_persona(player.leader_id).starting_bonus
    player = player.adjust_resources(
        money=bonus.money,
        server_capacity=bonus.server_capacity,
        ai_capacity=bonus.ai_capacity,
    ).advance_production(
        state.configuration,
        mau=bonus.mau_production,
        revenue=bonus.revenue_production,
    )
    if bonus.rating is not None:
        player = player.with_rating(bonus.rating)
    if bonus.tech_debt is not None:
        player = player.adjust_resources(
            tech_debt=bonus.tech_debt - player.resources.tech_debt
        )
    return player


def select_strategy(
    state: GameState,
    player_id: str,
    funding: FundingType,
    tech: TechApproach | None = None,
    product: ProductType | None = None,
    corporation_style: CorporationStyle | None = None,
) -> GameState:
    """Found *player_id*'s corporation; omitted choices follow the leader card."""
    if state.phase is not GamePhase.FUNDING_SELECTION:
        return state
    player = state.player(player_id)
    if player.strategy is not None or player.leader_id is None:
        return state
    leader = get_persona(player.leader_id)
    product = product or leader.product_lock[0]
    tech = tech or default_tech_for_leader(leader.starting_bonus.ai_capacity)
    style = corporation_style or default_corporation_style(funding)
    player = _found_corporation(player, funding, tech, product, style, state)
    state = state.replace_player(player)
    state = state.record(
        "corporation-founded",
        player_id=player_id,
        funding=funding.value,
        tech=tech.value,
        product=product.value,
        style=style.value,
    )
    if all(p.strategy is not None for p in state.players):
        seat_order = tuple(p.id for p in sorted(state.players, key=lambda p: p.seat))
        state = begin_round(state, 1, seat_order)
    return state


def select_funding(state: GameState, player_id: str, funding: FundingType) -> GameState:
    """Pick funding and accept the leader's default tech, product and style."""
    return select_strategy(state, player_id, funding)


def use_pivot_power(state: GameState, player_id: str, product: ProductType) -> GameState:
    """Switch product market once per game; venture-funded companies only."""
    if state.phase in {GamePhase.SETUP, GamePhase.GAME_END}:
        return state
    player = state.player(player_id)
    strategy = player.strategy
    if strategy is None or strategy.funding is not FundingType.VC_HEAVY:
        return state
    if player.powers.has_used(PIVOT_POWER_ID) or strategy.product is product:
        return state
    player = player.model_copy(
        update={
            "strategy": strategy.model_copy(update={"product": product}),
            "powers": player.powers.mark(PIVOT_POWER_ID),
        }
    )
    state = state.replace_player(player)
    return state.record("pivot", player_id=player_id, product=product.value)


__all__ = [
    "PLAYER_COLORS",
    "init_game",
    "select_funding",
    "select_leader",
    "select_strategy",
    "set_player_name",
    "use_pivot_power",
]
