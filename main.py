#!/usr/bin/env python3

import argparse
import random

from genesis.core.data import BuildingKind, RoomKind
from genesis.core.engine import CastleError
from genesis.core.events import EventManager, LogSaveRequested
from genesis.game.combat import CombatResolver
from genesis.game.managers import LogManager
from genesis.game.run import RunManager


def play_encounter(resolver, state):
    """Play every affordable card, then end the turn, until the fight is over."""
    while not state.is_terminal:
        if not state.player_skip_turn:
            for card in list(state.hand):
                if state.is_terminal:
                    break
                if resolver.validate_play(state, card.card_id).is_valid:
                    state = resolver.play_card(state, card.card_id)
        if not state.is_terminal:
            state = resolver.end_turn(state)
    return state


def print_combat_log(state):
    for entry in state.log:
        print("-" * 40 if entry.is_separator else entry.text)


def invest(run_manager):
    """Spend gold on the castle: upgrade the cheapest building, else build a mine."""
    castle = run_manager.meta.castle
    upgradeable = [tile.index for tile in castle.tiles if castle.can_upgrade(tile.index)]
    free = [tile.index for tile in castle.tiles if tile.is_empty]
    try:
        if upgradeable:
            order = run_manager.upgrade(min(upgradeable, key=castle.upgrade_cost))
        elif free:
            order = run_manager.build(free[0], BuildingKind.MINE)
        else:
            return
    except CastleError:
        return
    print(f"Castle: tile {order.tile} -> {order.kind.value} level {order.target_level} (-{order.cost} gold)")


def climb(run_manager, resolver, max_floor, build=False):
    run = run_manager.start_run()
    while not run.is_over and run.current_floor < max_floor:
        if build:
            invest(run_manager)
        open_rooms = [i for i, option in enumerate(run.room_options) if not option.is_locked]
        choice = random.choice(open_rooms)
        option = run.room_options[choice]
        run_manager.select_room(choice)
        print(f"\n== Floor {run.current_floor}: {option.title} ==")

        if option.kind == RoomKind.COMBAT:
            state = play_encounter(resolver, run.active_encounter)
            print_combat_log(state)
            reward = run_manager.conclude_encounter(state)
            if reward is not None:
                kind = random.choice(reward.options)
                level = run_manager.claim_reward(kind)
                print(f"Reward: {kind.value} -> level {level}")
        else:
            artifact = run_manager.open_chest()
            run_manager.claim_chest()
            print(f"Chest: {artifact.icon} {artifact.name} (+{artifact.income_bonus} gold/day)")

    if not run.is_over:
        run_manager.end_run()
    return run


def main():
    parser = argparse.ArgumentParser(description="Auto-play a tower run in the terminal")
    parser.add_argument("--seed", type=int, default=None, help="Seed for rooms, enemies and hands")
    parser.add_argument("--floors", type=int, default=10, help="Stop after reaching this floor")
    parser.add_argument("--build", action="store_true", help="Spend gold on castle buildings between floors")
    parser.add_argument("--save-log", action="store_true", help="Write the diagnostic log to logs/")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    event_manager = EventManager()
    log_manager = LogManager(event_manager)
    resolver = CombatResolver(event_manager=event_manager, rng=random.Random(args.seed))
    run_manager = RunManager(resolver, event_manager=event_manager, rng=random.Random(args.seed))

    try:
        run = climb(run_manager, resolver, args.floors, build=args.build)
    except KeyboardInterrupt:
        print("\n\nRun interrupted by user")
        return
    finally:
        if args.save_log:
            event_manager.publish(LogSaveRequested(turn=0))
        event_manager.process_events()

    meta = run_manager.meta
    print(f"\nRun over on floor {run.current_floor} ({run.end_reason})")
    print(f"Days: {meta.days}  Gold: {meta.gold}  Best floor: {meta.best_floor}")
    print(f"Castle: {meta.castle.buildings_count} buildings, +{run_manager.income_per_day()} gold/day")
    print(f"Diagnostic messages collected: {len(log_manager.messages)}")


if __name__ == "__main__":
    main()
