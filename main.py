"""
WristToss - throw and catch a virtual cursor with wrist gestures

Entry point for the application.
"""
import argparse
import sys
from pathlib import Path

from loguru import logger

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="WristToss - gesture throw-and-catch cursor simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--input",
        choices=["mouse", "controller"],
        default=None,
        help="Sensor stand-in (overrides config, default: mouse)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--curveball",
        action="store_true",
        help="Enable curved flight paths",
    )

    parser.add_argument(
        "--lookahead",
        type=float,
        default=None,
        help="Lookahead delay in ms before a throw commits (overrides config)",
    )

    parser.add_argument(
        "--strength",
        type=float,
        default=None,
        help="Throw strength (overrides config)",
    )

    parser.add_argument(
        "--sensitivity",
        type=float,
        default=None,
        help="Flick sensitivity 0-1, 0 disables flicks (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging, state readout and throw preview line",
    )

    return parser.parse_args()


def connect_sensor(source, engine):
    """Wire a sensor stand-in's signals into the engine."""
    source.tap.connect(engine.on_tap)
    source.arm_direction.connect(engine.on_arm_direction)
    source.catch_requested.connect(engine.catch)
    if hasattr(source, 'flick_probability'):
        source.flick_probability.connect(engine.on_flick_probability)


def run(config, debug: bool = False):
    """Run WristToss with the configured input stand-in."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from toss import ThrowDecisionEngine
    from ui import PlayWindow, qt_schedule

    app = QApplication(sys.argv)

    engine = ThrowDecisionEngine(config, schedule=qt_schedule)
    window = PlayWindow(engine, config.ui, debug=debug)
    window.show()

    # Mouse and keyboard always work; the gamepad is optional on top
    connect_sensor(window.play_area, engine)

    thread = None
    worker = None
    if config.input.mode == "controller":
        from controller import ControllerWorker

        thread = QThread()
        worker = ControllerWorker(config)
        worker.moveToThread(thread)

        # Queued connections keep every engine call on the GUI thread
        thread.started.connect(worker.start_process)
        worker.tap.connect(engine.on_tap, Qt.QueuedConnection)
        worker.arm_direction.connect(engine.on_arm_direction, Qt.QueuedConnection)
        worker.flick_probability.connect(engine.on_flick_probability, Qt.QueuedConnection)
        worker.catch_requested.connect(engine.catch, Qt.QueuedConnection)
        worker.disconnected.connect(lambda: logger.warning("Controller lost"), Qt.QueuedConnection)
        worker.error.connect(lambda msg: logger.error(f"CONTROLLER ERROR: {msg}"), Qt.QueuedConnection)
        thread.start()

    def cleanup():
        """Ensure the input device is released on exit."""
        if worker is not None:
            logger.info("Cleaning up controller resources...")
            worker.stop_process()
            thread.quit()
            thread.wait(2000)

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        logger.info(f"Received signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "INFO")

    from toss import load_config, validate_config
    try:
        config = load_config(args.config)

        # Apply CLI overrides
        if args.input:
            config.input.mode = args.input
        if args.curveball:
            config.throw.curveball_enabled = True
        if args.lookahead is not None:
            config.throw.lookahead_delay_ms = args.lookahead
        if args.strength is not None:
            config.throw.throw_strength = args.strength
        if args.sensitivity is not None:
            config.flick.sensitivity = args.sensitivity
        if args.debug:
            config.ui.show_debug_line = True
        validate_config(config)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info("WristToss starting...")
    logger.info(f"  Input mode: {config.input.mode}")
    logger.info(f"  Curveball: {config.throw.curveball_enabled}")
    logger.info(f"  Lookahead: {config.throw.lookahead_delay_ms}ms")
    logger.info(f"  Flick sensitivity: {config.flick.sensitivity}")

    return run(config, debug=args.debug)


if __name__ == "__main__":
    sys.exit(main())
