"""Engineer draft protocols: hybrid pick draft, sealed bids and persona auctions.

Every transition takes a :class:`GameState` and returns the next one. Moves
that break a game rule (wrong phase, wrong picker, unaffordable bid) return
the very same state object so callers can detect rejection with ``is``.
"""

from __future__ import annotations

from math import ceil
from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.corporations import LEAN_TEAM_DISCOUNT
from tycoon_backend.game_logic.catalog.engineers import (
    generate_intern,
    persona_engineer,
)
from tycoon_backend.game_logic.catalog.personas import LeaderPassive, PersonaTrait
from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.game_logic.phases import (
    DraftMode,
    DraftPhase,
    GamePhase,
    PlanningMode,
)
from tycoon_backend.game_logic.state import (
    AuctionState,
    Bid,
    BidResult,
    Engineer,
    GameState,
    HiredEngineer,
    PickOrderState,
    Player,
    TurnState,
)
from tycoon_backend.shared.enums import FundingType
from tycoon_backend.shared.value_objects import round_half_up

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

PHILANTHROPIST_SALARY = 10
LEAN_EFFICIENCY_DISCOUNT = 5


def build_snake_order(
    players: Iterable[Player],
    metric: Callable[[Player], int],
    total_picks: int,
) -> tuple[str, ...]:
    """Return a snake pick order covering at least *total_picks* turns.

    Players are sorted by *metric* ascending with ties broken by id; the
    order then alternates forward and reversed laps.
    """
    ranked = sorted(players, key=lambda player: (metric(player), player.id))
    forward = tuple(player.id for player in ranked)
    if not forward:
        return ()
    laps = ceil(max(total_picks, 0) / len(forward)) + 1
    order: list[str] = []
    for lap in range(laps):
        order.extend(forward if lap % 2 == 0 else reversed(forward))
    return tuple(order)


def mau_metric(player: Player) -> int:
    return player.metrics.mau


def vp_metric(player: Player) -> int:
    return player.victory_points()


def order_by_mau(players: Iterable[Player]) -> tuple[str, ...]:
    """Return player ids with the trailing MAU player first."""
    ranked = sorted(players, key=lambda player: (player.metrics.mau, player.id))
    return tuple(player.id for player in ranked)


def hire_cost(state: GameState, player: Player, engineer: Engineer) -> int:
    """Return what *player* pays to hire *engineer* this round."""
    cost = engineer.base_salary
    theme = state.active_theme()
    if theme is not None:
        cost += theme.salary_change
    if engineer.persona_trait is PersonaTrait.PHILANTHROPIST:
        cost += PHILANTHROPIST_SALARY
    if player.strategy is not None and player.strategy.funding is FundingType.BOOTSTRAPPED:
        cost = round_half_up(cost * LEAN_TEAM_DISCOUNT)
    if player.has_passive(LeaderPassive.LEAN_EFFICIENCY):
        cost -= LEAN_EFFICIENCY_DISCOUNT
    return max(0, cost)


def _hire(player: Player, engineer: Engineer, cost: int) -> Player:
    hired = HiredEngineer.hire(engineer, cost).model_copy(update={"rounds_retained": 1})
    player = player.adjust_resources(money=-cost)
    return player.model_copy(update={"engineers": (*player.engineers, hired)})


def _pool_engineer(state: GameState, engineer_id: str) -> Engineer:
    for engineer in state.round_state.engineer_pool:
        if engineer.id == engineer_id:
            return engineer
    msg = f"Engineer '{engineer_id}' is not in the draft pool."
    raise ProgrammerError(msg)


def _in_generic_draft(state: GameState, mode: DraftMode) -> bool:
    return (
        state.phase is GamePhase.ENGINEER_DRAFT
        and state.round_state.draft_phase is DraftPhase.GENERIC_DRAFT
        and state.configuration.draft_mode is mode
    )


def current_drafter(state: GameState) -> str | None:
    """Return whose turn it is in the engineer draft, if anyone's."""
    if state.phase is not GamePhase.ENGINEER_DRAFT:
        return None
    round_state = state.round_state
    if round_state.draft_phase is DraftPhase.PERSONA_AUCTION and round_state.auction:
        return round_state.auction.whose_turn()
    if (
        round_state.draft_phase is DraftPhase.GENERIC_DRAFT
        and state.configuration.draft_mode is DraftMode.HYBRID
        and round_state.draft_pick_index < len(round_state.draft_order)
    ):
        return round_state.draft_order[round_state.draft_pick_index]
    return None


def _advance_pick(state: GameState) -> GameState:
    index = state.round_state.draft_pick_index + 1
    state = state.with_round_state(draft_pick_index=index)
    if index >= len(state.round_state.draft_order) or not state.round_state.engineer_pool:
        return finish_generic_draft(state)
    return state


def pick_engineer(state: GameState, player_id: str, engineer_id: str) -> GameState:
    """Hire *engineer_id* from the pool on the current picker's turn."""
    if not _in_generic_draft(state, DraftMode.HYBRID):
        return state
    if current_drafter(state) != player_id:
        return state
    player = state.player(player_id)
    engineer = _pool_engineer(state, engineer_id)
    cost = hire_cost(state, player, engineer)
    if not player.resources.can_afford(cost):
        return state
    state = state.replace_player(_hire(player, engineer, cost))
    pool = tuple(e for e in state.round_state.engineer_pool if e.id != engineer_id)
    state = state.with_round_state(engineer_pool=pool)
    state = state.record(
        "engineer-hired",
        f"{player.name} hired {engineer.name}",
        player_id=player_id,
        engineer_id=engineer_id,
        cost=cost,
    )
    return _advance_pick(state)


def pass_draft_pick(state: GameState, player_id: str) -> GameState:
    """Decline the current pick."""
    if not _in_generic_draft(state, DraftMode.HYBRID):
        return state
    if current_drafter(state) != player_id:
        return state
    passed = (*state.round_state.draft_passed, player_id)
    state = state.with_round_state(draft_passed=passed)
    state = state.record("draft-pick-passed", player_id=player_id)
    return _advance_pick(state)


def submit_bid(
    state: GameState, player_id: str, engineer_id: str, amount: int
) -> GameState:
    """Record a sealed bid; a repeated bid on the same engineer replaces the old one."""
    if not _in_generic_draft(state, DraftMode.SEALED_BID):
        return state
    player = state.player(player_id)
    _pool_engineer(state, engineer_id)
    if amount < 0:
        msg = "Bid amount must not be negative."
        raise ProgrammerError(msg)
    if not player.resources.can_afford(amount):
        return state
    round_state = state.round_state
    bids = tuple(
        bid
        for bid in round_state.bids
        if not (bid.player_id == player_id and bid.engineer_id == engineer_id)
    )
    bid = Bid(
        player_id=player_id,
        engineer_id=engineer_id,
        amount=amount,
        sequence=round_state.next_bid_sequence,
    )
    state = state.with_round_state(
        bids=(*bids, bid), next_bid_sequence=round_state.next_bid_sequence + 1
    )
    return state.record(
        "bid-submitted", player_id=player_id, engineer_id=engineer_id, amount=amount
    )


def resolve_bids(state: GameState) -> GameState:
    """Award pool engineers to sealed bids, highest contested engineer first.

    For each engineer the highest bid wins, earliest submission breaking
    ties, skipping bidders who already won this round or can no longer pay.
    """
    if not _in_generic_draft(state, DraftMode.SEALED_BID):
        return state
    round_state = state.round_state
    by_engineer: dict[str, list[Bid]] = {}
    for bid in round_state.bids:
        by_engineer.setdefault(bid.engineer_id, []).append(bid)
    pool_index = {e.id: index for index, e in enumerate(round_state.engineer_pool)}
    ordered = sorted(
        by_engineer,
        key=lambda eid: (-max(b.amount for b in by_engineer[eid]), pool_index[eid]),
    )

    winners: set[str] = set()
    results: list[BidResult] = []
    hired_ids: set[str] = set()
    for engineer_id in ordered:
        engineer = _pool_engineer(state, engineer_id)
        candidates = sorted(
            by_engineer[engineer_id], key=lambda b: (-b.amount, b.sequence)
        )
        result = BidResult(engineer_id=engineer_id)
        for bid in candidates:
            if bid.player_id in winners:
                continue
            bidder = state.player(bid.player_id)
            if not bidder.resources.can_afford(bid.amount):
                continue
            state = state.replace_player(_hire(bidder, engineer, bid.amount))
            state = state.record(
                "engineer-hired",
                f"{bidder.name} won {engineer.name}",
                player_id=bidder.id,
                engineer_id=engineer_id,
                cost=bid.amount,
            )
            winners.add(bid.player_id)
            hired_ids.add(engineer_id)
            result = BidResult(
                engineer_id=engineer_id, winner_id=bid.player_id, amount=bid.amount
            )
            break
        results.append(result)

    pool = tuple(e for e in state.round_state.engineer_pool if e.id not in hired_ids)
    state = state.with_round_state(
        engineer_pool=pool, bid_results=tuple(results), bids=()
    )
    state = state.record("bids-resolved", winners=sorted(winners))
    return finish_generic_draft(state)


def finish_generic_draft(state: GameState) -> GameState:
    """Move from generic hiring on to persona auctions or straight to finalising."""
    if state.round_state.persona_pool:
        return _start_auction(state, state.round_state.persona_pool[0])
    return finalize_draft(state)


def _start_auction(state: GameState, persona_id: str) -> GameState:
    auction = AuctionState(
        persona_id=persona_id,
        bidding_order=order_by_mau(state.players),
        current_bid=state.configuration.auction_starting_bid,
    )
    state = state.with_round_state(
        draft_phase=DraftPhase.PERSONA_AUCTION, auction=auction
    )
    return state.record("auction-started", persona_id=persona_id)


def minimum_bid(state: GameState) -> int | None:
    """Return the smallest legal raise in the running auction."""
    auction = state.round_state.auction
    if auction is None:
        return None
    config = state.configuration
    return max(config.auction_minimum_bid, auction.current_bid + config.auction_increment)


def _in_auction(state: GameState, player_id: str) -> AuctionState | None:
    auction = state.round_state.auction
    if (
        state.phase is not GamePhase.ENGINEER_DRAFT
        or state.round_state.draft_phase is not DraftPhase.PERSONA_AUCTION
        or auction is None
        or auction.whose_turn() != player_id
    ):
        return None
    return auction


def _next_bidder_index(auction: AuctionState) -> int:
    size = len(auction.bidding_order)
    for step in range(1, size + 1):
        index = (auction.current_index + step) % size
        if auction.bidding_order[index] not in auction.passed:
            return index
    return auction.current_index


def _after_auction_move(state: GameState, auction: AuctionState) -> GameState:
    auction = auction.model_copy(update={"current_index": _next_bidder_index(auction)})
    state = state.with_round_state(auction=auction)
    if len(auction.active_bidders()) <= 1:
        return _complete_auction(state, auction)
    return state


def place_auction_bid(state: GameState, player_id: str, amount: int) -> GameState:
    """Raise the running persona auction to *amount*."""
    auction = _in_auction(state, player_id)
    if auction is None:
        return state
    floor = minimum_bid(state)
    if floor is None or amount < floor:
        return state
    if not state.player(player_id).resources.can_afford(amount):
        return state
    auction = auction.model_copy(
        update={"current_bid": amount, "current_bidder": player_id}
    )
    state = state.record(
        "auction-bid", player_id=player_id, persona_id=auction.persona_id, amount=amount
    )
    return _after_auction_move(state, auction)


def pass_auction(state: GameState, player_id: str) -> GameState:
    """Drop out of the running persona auction."""
    auction = _in_auction(state, player_id)
    if auction is None:
        return state
    auction = auction.model_copy(update={"passed": (*auction.passed, player_id)})
    state = state.record(
        "auction-passed", player_id=player_id, persona_id=auction.persona_id
    )
    return _after_auction_move(state, auction)


def _complete_auction(state: GameState, auction: AuctionState) -> GameState:
    remaining = auction.active_bidders()
    winner_id = auction.current_bidder
    if winner_id is not None and remaining == (winner_id,):
        winner = state.player(winner_id)
        engineer = persona_engineer(auction.persona_id)
        state = state.replace_player(_hire(winner, engineer, auction.current_bid))
        state = state.record(
            "auction-won",
            f"{winner.name} signed {engineer.name}",
            player_id=winner_id,
            persona_id=auction.persona_id,
            cost=auction.current_bid,
        )
    else:
        state = state.record("auction-discarded", persona_id=auction.persona_id)
    pool = tuple(pid for pid in state.round_state.persona_pool if pid != auction.persona_id)
    state = state.with_round_state(persona_pool=pool, auction=None)
    if pool:
        return _start_auction(state, pool[0])
    return finalize_draft(state)


def intern_cost(state: GameState, player: Player, intern: Engineer) -> int:
    """Interns never cost more than the cap or than the player holds."""
    return min(
        hire_cost(state, player, intern),
        state.configuration.intern_cost_cap,
        player.resources.money,
    )


def apply_intern_safety_net(state: GameState) -> GameState:
    """Give every player without engineers a generated intern."""
    if all(player.engineers for player in state.players):
        return state
    rng, state = state.draw_rng()
    for player in state.players:
        if player.engineers:
            continue
        intern = generate_intern(rng, f"intern-r{state.current_round}-{player.id}")
        cost = intern_cost(state, player, intern)
        state = state.replace_player(_hire(player, intern, cost))
        state = state.record(
            "intern-assigned", player_id=player.id, engineer_id=intern.id, cost=cost
        )
    return state


def total_engineers(state: GameState) -> int:
    return sum(len(player.engineers) for player in state.players)


def finalize_draft(state: GameState) -> GameState:
    """Close the draft and open the planning step chosen by the configuration."""
    state = apply_intern_safety_net(state)
    players = tuple(p.model_copy(update={"is_ready": False}) for p in state.players)
    state = state.model_copy(update={"players": players})
    state = state.with_round_state(
        draft_phase=DraftPhase.COMPLETE, auction=None, occupied_actions={}
    )
    mode = state.configuration.planning_mode
    if mode is PlanningMode.ACTION_DRAFT:
        order = build_snake_order(state.players, vp_metric, total_engineers(state))
        state = state.with_round_state(turn=TurnState(order=order))
        state = state.model_copy(update={"phase": GamePhase.ACTION_DRAFT})
    else:
        if mode is PlanningMode.SEQUENTIAL:
            order = build_snake_order(state.players, mau_metric, total_engineers(state))
            state = state.with_round_state(sequential=PickOrderState(order=order))
        state = state.model_copy(update={"phase": GamePhase.PLANNING})
    return state.record("draft-complete", planning_mode=mode.value)


__all__ = [
    "apply_intern_safety_net",
    "build_snake_order",
    "current_drafter",
    "finalize_draft",
    "finish_generic_draft",
    "hire_cost",
    "intern_cost",
    "mau_metric",
    "minimum_bid",
    "order_by_mau",
    "pass_auction",
    "pass_draft_pick",
    "pick_engineer",
    "place_auction_bid",
    "resolve_bids",
    "submit_bid",
    "total_engineers",
    "vp_metric",
]
