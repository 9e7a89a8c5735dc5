from __future__ import annotations

import argparse
import logging

from plot_grid import GestureTracker, GridEngine, GridState


def _print_state(state: GridState) -> None:
    for kind in ("x", "y"):
        axis = state[kind]
        if axis.disabled:
            continue
        labels = ", ".join(str(label) for label in axis.labels)
        print(f"{kind}: offset={axis.offset:.3f} range={axis.range:.3f} scale={axis.scale:.4f} labels=[{labels}]")


def main() -> None:
    parser = argparse.ArgumentParser(description="Print grid axis states while replaying a pan/zoom gesture.")
    parser.add_argument("--width", type=float, default=640.0)
    parser.add_argument("--height", type=float, default=480.0)
    parser.add_argument("--x-type", default="linear", choices=("linear", "log", "time"))
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    grid = GridEngine(
        {"x": {"type": args.x_type}, "y": {"type": "linear"}},
        viewport=(0.0, 0.0, args.width, args.height),
        renderer=_print_state,
    )
    tracker = GestureTracker()
    replay = [
        ("pointer_down", {"x": 100, "y": 100}),
        ("pointer_move", {"x": 140, "y": 90}),
        ("pointer_up", {"x": 140, "y": 90}),
        ("wheel", {"x": 320, "y": 240, "delta_y": -120}),
        ("wheel", {"x": 50, "y": 400, "delta_y": 200}),
    ]
    for event_type, payload in replay:
        event = tracker.feed(event_type, payload)
        if event is not None:
            print(f"-- {event_type}: {event}")
            grid.handle_gesture(event)


if __name__ == "__main__":
    main()
