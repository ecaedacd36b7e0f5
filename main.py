#!/usr/bin/env python3

import argparse
import sys
import time

from darkportal.core.data import load_campaign
from darkportal.game.autopilot import Autopilot, AutopilotType, create_strategy
from darkportal.game.game import Game
from darkportal.renderers.console_renderer import ConsoleRenderer


HELP_TEXT = "Commands: a = attack, 1/2 = skill, w = wait, r = reset, d = toggle debug, q = quit"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Dark Portal combat core",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Play in the terminal
  python main.py --class human-knight              # Skip the selection prompt
  python main.py --simulate --class fire-mage      # Let the autopilot play
  python main.py --simulate --class elven-warrior --seed 7 --strategy cautious
        """
    )
    parser.add_argument("--class", dest="class_id", help="Character class id")
    parser.add_argument("--campaign", help="Path to a campaign YAML file")
    parser.add_argument("--seed", type=int, help="Seed for every damage roll")
    parser.add_argument("--simulate", action="store_true", help="Run the autopilot on synthetic time")
    parser.add_argument(
        "--strategy",
        choices=[t.name.lower() for t in AutopilotType],
        default="aggressive",
        help="Autopilot strategy for --simulate",
    )
    parser.add_argument("--tick", type=int, default=100, help="Simulation step in ms")
    parser.add_argument("--debug", action="store_true", help="Show debug output")
    return parser


def simulate(game: Game, class_id: str, strategy_name: str, tick_ms: int) -> int:
    strategy = create_strategy(AutopilotType[strategy_name.upper()])
    autopilot = Autopilot(game, strategy, tick_ms=tick_ms)
    result = autopilot.play(class_id)

    print(f"\n{strategy.get_strategy_name()} autopilot as {class_id}: {result.outcome.upper()}")
    print(f"Encounters won: {result.encounters_won}, commands: {result.commands_issued}, "
          f"time: {result.elapsed_ms / 1000:.1f}s, hp left: {result.player_hp}")
    return 0 if result.outcome == "victory" else 1


def choose_class(game: Game) -> str:
    classes = list(game.campaign.character_classes.values())
    for number, info in enumerate(classes, start=1):
        skills = ", ".join(skill.name for skill in info.skills)
        print(f"  {number}. {info.name} ({info.hp} HP) - {skills}")

    while True:
        choice = input("Choose your hero: ").strip()
        if choice.isdigit() and 1 <= int(choice) <= len(classes):
            return classes[int(choice) - 1].class_id
        if choice in game.campaign.character_classes:
            return choice
        print("Unknown choice")


def play(game: Game, renderer: ConsoleRenderer, class_id: str) -> int:
    game.open_character_select()
    if not game.select_character(class_id or choose_class(game)):
        print(f"Unknown character class: {class_id}")
        return 2

    print(HELP_TEXT)
    last_tick = time.monotonic()

    while True:
        command = input(f"{renderer.render_status(game)} > ").strip().lower()

        # Game time catches up with the wall clock before the command applies
        now = time.monotonic()
        game.update(int((now - last_tick) * 1000))
        last_tick = now

        if command == "q":
            return 0
        if command == "a":
            game.player_attack()
        elif command in ("1", "2"):
            game.player_use_skill(int(command) - 1)
        elif command == "r":
            game.reset_game()
            game.open_character_select()
            game.select_character(choose_class(game))
        elif command == "d":
            game.toggle_debug()
            renderer.show_debug = not renderer.show_debug
        elif command not in ("", "w"):
            print(HELP_TEXT)

        if game.run is None:
            print("Your run is over.")
            return 1


def main():
    args = build_parser().parse_args()

    campaign = load_campaign(args.campaign)
    game = Game(campaign, seed=args.seed)
    renderer = ConsoleRenderer(show_debug=args.debug, show_timestamps=args.simulate)
    game.add_sink(renderer)

    try:
        game.start()
        if args.simulate:
            if not args.class_id:
                print("--simulate needs --class")
                return 2
            return simulate(game, args.class_id, args.strategy, args.tick)
        return play(game, renderer, args.class_id)
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user")
        return 130
    finally:
        game.shutdown()
        print("\nThanks for playing!")


if __name__ == "__main__":
    sys.exit(main())
