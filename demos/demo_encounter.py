#!/usr/bin/env python3

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from genesis.core.events import EventManager
from genesis.game.combat import CombatResolver
from genesis.game.managers import LogManager


def main():
    enemy_id = sys.argv[1] if len(sys.argv) > 1 else "zesurumi_monks_v1"
    floor = int(sys.argv[2]) if len(sys.argv) > 2 else 3

    print("Genesis Combat - Encounter Demo")
    print(f"Auto-playing one encounter against {enemy_id} on floor {floor}")
    print("")

    event_manager = EventManager()
    log_manager = LogManager(event_manager)
    log_manager.toggle_debug()
    resolver = CombatResolver(event_manager=event_manager)

    state = resolver.start_encounter(enemy_id, floor, seed=7)
    while not state.is_terminal:
        print(f"Turn {state.turn}: HP {state.player.hp} vs {state.enemy.hp}, "
              f"enemy intends {state.intent.describe()}")
        if not state.player_skip_turn:
            for card in list(state.hand):
                if not state.is_terminal and resolver.validate_play(state, card.card_id).is_valid:
                    state = resolver.play_card(state, card.card_id)
        if not state.is_terminal:
            state = resolver.end_turn(state)
    event_manager.process_events()

    print("\nCombat log:")
    for entry in state.log:
        print("  " + ("-" * 36 if entry.is_separator else entry.text))

    print("\nDiagnostic log:")
    for line in log_manager.summary()["messages"]:
        print("  " + line)

    print(f"\nOutcome: {state.outcome.value}")


if __name__ == "__main__":
    main()
